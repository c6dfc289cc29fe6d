from datetime import datetime
from typing import Optional, Literal
from uuid import UUID
from pydantic import BaseModel, EmailStr

UserType = Literal["creator", "brand"]


class UserResponse(BaseModel):
    id: UUID
    email: str
    user_type: UserType
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None


class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    user_type: UserType
    full_name: Optional[str] = None


class SigninRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    redirect_to: str
    user: UserResponse


class TokenPayload(BaseModel):
    sub: str  # user_id
    email: str
    user_type: UserType
    exp: int
    type: str = "access"


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class CurrentUser(BaseModel):
    id: UUID
    email: str
    user_type: UserType
