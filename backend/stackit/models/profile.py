"""Profile model for public per-user data."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from stackit.models.user import User


class Profile(TimestampMixin, Base):
    """One profile row per user, keyed by the user id."""

    __tablename__ = "profile"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(320), nullable=True,
        comment="Contact email shown on the profile"
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(1000), nullable=True,
        comment="Profile picture URL"
    )

    user: Mapped["User"] = relationship(back_populates="profile")

    def __repr__(self) -> str:
        return f"<Profile(user_id={self.user_id}, email='{self.email}')>"
