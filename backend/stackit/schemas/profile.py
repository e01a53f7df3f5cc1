"""Profile Pydantic schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileResponse(BaseModel):
    """Public profile data."""
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime


class ProfileUpdateRequest(BaseModel):
    """Request to change the avatar. ``None`` clears it."""
    avatar_url: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("avatar_url")
    @classmethod
    def http_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("avatar_url must be an http(s) URL")
        return v
