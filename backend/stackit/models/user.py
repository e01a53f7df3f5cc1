"""User model for the identity layer."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from stackit.models.profile import Profile
    from stackit.models.question import Question
    from stackit.models.answer import Answer
    from stackit.models.user_vote import UserVote


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Account used for sign-in.

    Supports email/password authentication with bcrypt hashing. Public
    per-user data lives on ``Profile``.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True,
        comment="User email address (unique)"
    )
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False,
        comment="bcrypt hashed password"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
        comment="Whether user account is active"
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
        comment="Last login timestamp"
    )

    # Relationships
    profile: Mapped[Optional["Profile"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False
    )
    questions: Mapped[List["Question"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    answers: Mapped[List["Answer"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    votes: Mapped[List["UserVote"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
