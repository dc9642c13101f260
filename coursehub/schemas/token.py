from pydantic import BaseModel
from typing import Literal, Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenPayload(BaseModel):
    sub: str
    type: Literal["student", "admin"]
    sid: Optional[str] = None
    jti: Optional[str] = None
    exp: Optional[int] = None
