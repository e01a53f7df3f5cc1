"""SQLAlchemy models for StackIt.

All models are imported here so metadata.create_all sees every table.
"""

from stackit.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from stackit.models.user import User
from stackit.models.profile import Profile
from stackit.models.question import Question
from stackit.models.answer import Answer
from stackit.models.user_vote import UserVote

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
    "Profile",
    "Question",
    "Answer",
    "UserVote",
]
