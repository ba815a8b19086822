from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=256)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=8, max_length=256, description="Current password is required")
    new_password: str = Field(..., min_length=8, max_length=256, description="New password must be at least 8 characters")


class UserResponse(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class SessionUser(BaseModel):
    """Identity carried by a verified session token."""

    id: int
    email: str


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: UserResponse


class MessageOnlyResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class AuthCheckResponse(BaseModel):
    is_authenticated: bool = Field(..., serialization_alias="isAuthenticated")
    user: Optional[SessionUser] = None
