"""Question Pydantic schemas and tag normalization."""

from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stackit.schemas.answer import AnswerResponse

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 150
DESCRIPTION_MIN_LENGTH = 30
MAX_TAGS = 5
TAG_MAX_LENGTH = 35


def normalize_tags(raw: Any) -> List[str]:
    """Coerce a loosely-typed tag payload into a clean tag list.

    Non-list payloads become an empty list. Entries are trimmed, blanks,
    non-strings and over-long entries are dropped, exact duplicates keep
    their first occurrence, and at most MAX_TAGS survive.
    """
    if not isinstance(raw, (list, tuple)):
        return []
    tags: List[str] = []
    for entry in raw:
        if not isinstance(entry, str):
            continue
        tag = entry.strip()
        if not tag or len(tag) > TAG_MAX_LENGTH or tag in tags:
            continue
        tags.append(tag)
        if len(tags) == MAX_TAGS:
            break
    return tags


class QuestionCreateRequest(BaseModel):
    """Request to post a new question."""
    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=DESCRIPTION_MIN_LENGTH, max_length=50000)
    tags: List[str] = Field(min_length=1)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        for tag in v:
            if len(tag.strip()) > TAG_MAX_LENGTH:
                raise ValueError(f"Tags must be at most {TAG_MAX_LENGTH} characters")
        tags = normalize_tags(v)
        if not tags:
            raise ValueError("Add at least one tag")
        if len({t for t in (s.strip() for s in v) if t}) > MAX_TAGS:
            raise ValueError(f"Add up to {MAX_TAGS} tags")
        return tags


class QuestionResponse(BaseModel):
    """Question as shown on listing cards."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    tags: List[str] = []
    vote_count: int = 0
    answer_count: int = 0
    created_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> List[str]:
        return normalize_tags(v)


class QuestionDetailResponse(QuestionResponse):
    """Question with its answers and the caller's votes."""
    answers: List[AnswerResponse] = []
    user_votes: Dict[str, str] = {}


class PopularTag(BaseModel):
    """Tag usage count for the listing sidebar."""
    tag: str
    count: int
