"""UserVote model for tracking per-user question and answer votes."""

import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from stackit.models.user import User
    from stackit.models.question import Question
    from stackit.models.answer import Answer


class UserVote(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Tracks which user voted on which target to prevent duplicates.

    Exactly one of ``question_id`` / ``answer_id`` is set.
    """

    __tablename__ = "user_votes"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    question_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    answer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    vote_type: Mapped[str] = mapped_column(
        String(4), nullable=False,
        comment="'up' or 'down'"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_user_question_vote"),
        UniqueConstraint("user_id", "answer_id", name="uq_user_answer_vote"),
        CheckConstraint(
            "(question_id IS NULL) <> (answer_id IS NULL)",
            name="ck_user_votes_single_target",
        ),
        CheckConstraint("vote_type IN ('up', 'down')", name="ck_user_votes_type"),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="votes")
    question: Mapped[Optional["Question"]] = relationship(back_populates="votes")
    answer: Mapped[Optional["Answer"]] = relationship(back_populates="votes")

    @property
    def target_id(self) -> uuid.UUID:
        return self.question_id or self.answer_id

    def __repr__(self) -> str:
        return f"<UserVote(user={self.user_id}, target={self.target_id}, type={self.vote_type})>"
