"""Auth Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, ConfigDict, model_validator

from stackit.schemas.profile import ProfileResponse


class SignUpRequest(BaseModel):
    """User sign-up request."""
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "SignUpRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Account info returned after sign-up and sign-in."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    is_active: bool
    created_at: datetime


class SessionResponse(BaseModel):
    """The caller's current session."""
    user: UserResponse
    profile: Optional[ProfileResponse] = None
    expires_at: Optional[datetime] = None
