# bitacora/app/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from bitacora.app.schemas.common import CamelModel, RequestModel


# Schema used when a user registers
class UserCreate(RequestModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(RequestModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    profile_image: Optional[str] = None


class UserStatusUpdate(RequestModel):
    is_active: bool


# Returned to clients. The password hash is never part of any response schema
class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str
    profile_image: str = ""
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    user: UserResponse


class ProfileEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse


# Public directory entry for the social view
class UserSummary(CamelModel):
    id: str
    name: str
    email: str
    created_at: datetime
    posts_count: int = 0
    activities_count: int = 0


class CurrentUser(CamelModel):
    """Identity projection attached to authenticated requests."""
    id: str
    email: str
    name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
