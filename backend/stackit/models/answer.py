"""Answer model."""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Text, ForeignKey, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from stackit.models.user import User
    from stackit.models.question import Question
    from stackit.models.user_vote import UserVote


class Answer(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An answer to a question."""

    __tablename__ = "answers"

    question_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    content: Mapped[str] = mapped_column(
        Text, nullable=False,
        comment="Markdown body"
    )
    vote_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Signed sum of vote records"
    )

    __table_args__ = (
        Index("idx_answers_question_votes", "question_id", "vote_count"),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="answers")
    question: Mapped["Question"] = relationship(back_populates="answers")
    votes: Mapped[List["UserVote"]] = relationship(
        back_populates="answer", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id})>"
