"""Question model."""

import uuid
from typing import TYPE_CHECKING, Any, List

from sqlalchemy import String, Text, ForeignKey, Integer, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from stackit.models.user import User
    from stackit.models.answer import Answer
    from stackit.models.user_vote import UserVote


class Question(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A question asked by a user.

    ``vote_count`` and ``answer_count`` are running aggregates maintained by
    the vote and answer services.
    """

    __tablename__ = "questions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(
        String(150), nullable=False,
        comment="One-line summary of the problem"
    )
    description: Mapped[str] = mapped_column(
        Text, nullable=False,
        comment="Markdown body"
    )
    tags: Mapped[Any] = mapped_column(
        JSON, nullable=False, default=list,
        comment="List of tag strings"
    )
    vote_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Signed sum of vote records"
    )
    answer_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )

    __table_args__ = (
        Index("idx_questions_vote_count", "vote_count"),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="questions")
    answers: Mapped[List["Answer"]] = relationship(
        back_populates="question", cascade="all, delete-orphan"
    )
    votes: Mapped[List["UserVote"]] = relationship(
        back_populates="question", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, title='{self.title[:30]}')>"
