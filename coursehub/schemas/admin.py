from pydantic import BaseModel, EmailStr, field_validator, ConfigDict
from typing import Optional
from datetime import datetime

from coursehub.core.constants import AdminRoleEnum
from coursehub.schemas.token import Token


class AdminBase(BaseModel):
    email: EmailStr
    first_name: str
    last_name: str

class AdminCreate(AdminBase):
    password: str

    @field_validator("password")
    def validate_password(cls, v):
        if not v or not v.strip():
            raise ValueError("Password cannot be empty or contain only whitespace.")
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long.")
        return v

class BootstrapAdminRequest(AdminCreate):
    bootstrap_secret: Optional[str] = None

class Admin(AdminBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: AdminRoleEnum
    avatar: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

class AdminLoginResponse(BaseModel):
    user: Admin
    token: Token
