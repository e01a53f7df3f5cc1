"""Vote Pydantic schemas."""

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class VoteRequest(BaseModel):
    """Request schema for voting on a question or answer."""

    vote_type: Literal["up", "down"]


class VoteResponse(BaseModel):
    """Committed aggregate after a vote, plus the caller's resulting vote."""

    target_type: Literal["question", "answer"]
    target_id: UUID
    vote_count: int
    user_vote: Optional[Literal["up", "down"]] = None
