from pydantic import BaseModel, EmailStr, field_validator, ConfigDict, model_validator
from typing import Optional, Any, Literal
from datetime import datetime

from coursehub.core.constants import AuthProviderEnum
from coursehub.schemas.token import Token


def _validate_password(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Password cannot be empty or contain only whitespace.")
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters long.")
    return v


class StudentBase(BaseModel):
    email: EmailStr
    first_name: str
    last_name: str

class StudentRegister(StudentBase):
    password: str
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None

    @field_validator("password")
    def validate_password(cls, v):
        return _validate_password(v)

class StudentUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    education: Optional[str] = None
    occupation: Optional[str] = None

    @field_validator("first_name", "last_name")
    def not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name cannot be empty")
        return v

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not any(v is not None for v in data.values()):
            raise ValueError("At least one field must be provided for update")
        return data

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    def validate_new_password(cls, v):
        return _validate_password(v)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class OAuthLoginRequest(BaseModel):
    """Identity token (Google) or access token (GitHub) issued to the client."""
    provider: Literal["google", "github"]
    token: str

class OAuthRegisterRequest(OAuthLoginRequest):
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class Student(StudentBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    avatar: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    education: Optional[str] = None
    occupation: Optional[str] = None
    auth_provider: AuthProviderEnum
    is_verified: bool
    is_active: bool
    blocked: bool
    has_password: bool
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

class StudentLoginResponse(BaseModel):
    user: Student
    token: Token
