"""Answer Pydantic schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnswerCreateRequest(BaseModel):
    """Request to answer a question."""
    content: str = Field(max_length=20000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter your answer")
        return v


class AnswerResponse(BaseModel):
    """Single answer response."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    question_id: UUID
    user_id: UUID
    content: str
    vote_count: int = 0
    created_at: datetime
