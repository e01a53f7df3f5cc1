"""Answer vote endpoint (answers are created under /questions/{id}/answers)."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.dependencies import get_db, get_session_context
from stackit.schemas import ApiResponse, VoteRequest, VoteResponse
from stackit.services.cache_service import CacheService, get_cache, invalidate_questions_cache
from stackit.services.vote_service import VoteService, VoteTarget

router = APIRouter()


@router.post("/{answer_id}/vote", response_model=ApiResponse)
async def vote_on_answer(
    answer_id: UUID,
    vote: VoteRequest,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Vote on an answer. Requires authentication; same rules as question votes."""
    service = VoteService(db)
    result = await service.vote(ctx, VoteTarget("answer", answer_id), vote.vote_type)
    await invalidate_questions_cache(cache)

    return ApiResponse(
        status="success",
        data=VoteResponse(**result.to_dict()).model_dump(mode="json"),
    )
