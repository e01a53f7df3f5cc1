"""Services module for business logic and data operations.

This module contains the service classes behind the StackIt API. Services
take an explicit ``SessionContext`` wherever an operation needs a signed-in
user.
"""

from stackit.services.answer_service import AnswerService
from stackit.services.auth_service import AuthService
from stackit.services.profile_service import ProfileService
from stackit.services.question_service import QuestionService
from stackit.services.vote_service import VoteResult, VoteService, VoteTarget
from stackit.services.vote_tally import VoteDirection, VoteTally

__all__ = [
    "AnswerService",
    "AuthService",
    "ProfileService",
    "QuestionService",
    "VoteResult",
    "VoteService",
    "VoteTarget",
    "VoteDirection",
    "VoteTally",
]
