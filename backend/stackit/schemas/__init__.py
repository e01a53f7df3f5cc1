"""Pydantic schemas for the StackIt API.

All request/response models are defined here for easy import.
"""

from stackit.schemas.common import ApiResponse, ErrorDetail, ErrorResponse, PaginationMeta
from stackit.schemas.profile import ProfileResponse, ProfileUpdateRequest
from stackit.schemas.auth import (
    LoginRequest,
    SessionResponse,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from stackit.schemas.answer import AnswerCreateRequest, AnswerResponse
from stackit.schemas.question import (
    PopularTag,
    QuestionCreateRequest,
    QuestionDetailResponse,
    QuestionResponse,
)
from stackit.schemas.vote import VoteRequest, VoteResponse
from stackit.schemas.health import HealthCheckResponse

__all__ = [
    # Common
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "PaginationMeta",
    # Profile
    "ProfileResponse",
    "ProfileUpdateRequest",
    # Auth
    "LoginRequest",
    "SessionResponse",
    "SignUpRequest",
    "TokenResponse",
    "UserResponse",
    # Answer
    "AnswerCreateRequest",
    "AnswerResponse",
    # Question
    "PopularTag",
    "QuestionCreateRequest",
    "QuestionDetailResponse",
    "QuestionResponse",
    # Vote
    "VoteRequest",
    "VoteResponse",
    # Health
    "HealthCheckResponse",
]
