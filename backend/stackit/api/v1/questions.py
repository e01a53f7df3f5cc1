"""Questions API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.config import settings
from stackit.core.context import SessionContext
from stackit.dependencies import get_db, get_session_context
from stackit.schemas import (
    AnswerCreateRequest,
    AnswerResponse,
    ApiResponse,
    PaginationMeta,
    PopularTag,
    QuestionCreateRequest,
    QuestionDetailResponse,
    QuestionResponse,
    VoteRequest,
    VoteResponse,
)
from stackit.services.answer_service import AnswerService
from stackit.services.cache_service import (
    CacheService,
    cache_key_for_questions,
    get_cache,
    invalidate_questions_cache,
)
from stackit.services.question_service import QuestionService
from stackit.services.vote_service import VoteService, VoteTarget

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def list_questions(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    sort_by: str = Query("newest", pattern="^(newest|votes|answers)$", description="Sort method"),
    tag: Optional[str] = Query(None, max_length=35, description="Case-insensitive tag substring"),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """List questions with tag filtering and sorting.

    Sort options:
    - newest: Most recently asked first (default)
    - votes: Highest vote count first
    - answers: Most answers first

    This endpoint is cached briefly; posting, answering and voting
    invalidate the cache.
    """
    cache_key = cache_key_for_questions(page=page, limit=limit, sort_by=sort_by, tag=tag)
    cached = await cache.get(cache_key)
    if cached:
        return ApiResponse.model_validate_json(cached)

    service = QuestionService(db)
    questions, total = await service.list_questions(
        sort_by=sort_by,
        tag=tag,
        page=page,
        limit=limit,
    )

    response = ApiResponse(
        status="success",
        data=[QuestionResponse.model_validate(q).model_dump(mode="json") for q in questions],
        meta=PaginationMeta.build(page=page, limit=limit, total=total),
    )

    await cache.set(cache_key, response.model_dump_json(), ttl=settings.QUESTION_LIST_CACHE_TTL)

    return response


@router.get("/tags/popular", response_model=ApiResponse)
async def popular_tags(
    limit: int = Query(12, ge=1, le=50, description="Number of tags to return"),
    db: AsyncSession = Depends(get_db),
):
    """Most used tags across all questions."""
    service = QuestionService(db)
    tags = await service.get_popular_tags(limit=limit)
    return ApiResponse(
        status="success",
        data=[PopularTag(tag=t, count=n).model_dump() for t, n in tags],
    )


@router.post("", response_model=ApiResponse, status_code=201)
async def create_question(
    body: QuestionCreateRequest,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Post a question. Requires authentication.

    Title needs at least 10 characters, description at least 30, and one
    to five tags.
    """
    service = QuestionService(db)
    question = await service.create_question(
        ctx,
        title=body.title,
        description=body.description,
        tags=body.tags,
    )
    await invalidate_questions_cache(cache)

    return ApiResponse(
        status="success",
        data=QuestionResponse.model_validate(question).model_dump(mode="json"),
    )


@router.get("/{question_id}", response_model=ApiResponse)
async def get_question(
    question_id: UUID,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a question with its answers and the caller's votes."""
    question = await QuestionService(db).get_question(question_id)
    answers = await AnswerService(db).list_answers(question_id)
    user_votes = await VoteService(db).get_user_votes(ctx, question_id)

    # Built from the base schema so the answers relationship is never lazy-loaded
    detail = QuestionDetailResponse(
        **QuestionResponse.model_validate(question).model_dump(),
        answers=[AnswerResponse.model_validate(a) for a in answers],
        user_votes=user_votes,
    )

    return ApiResponse(status="success", data=detail.model_dump(mode="json"))


@router.get("/{question_id}/answers", response_model=ApiResponse)
async def list_answers(question_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get all answers for a question, highest voted first."""
    await QuestionService(db).get_question(question_id)
    answers = await AnswerService(db).list_answers(question_id)

    return ApiResponse(
        status="success",
        data=[AnswerResponse.model_validate(a).model_dump(mode="json") for a in answers],
    )


@router.post("/{question_id}/answers", response_model=ApiResponse, status_code=201)
async def create_answer(
    question_id: UUID,
    body: AnswerCreateRequest,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Answer a question. Requires authentication."""
    service = AnswerService(db)
    answer = await service.create_answer(ctx, question_id=question_id, content=body.content)
    await invalidate_questions_cache(cache)

    return ApiResponse(
        status="success",
        data=AnswerResponse.model_validate(answer).model_dump(mode="json"),
    )


@router.post("/{question_id}/vote", response_model=ApiResponse)
async def vote_on_question(
    question_id: UUID,
    vote: VoteRequest,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Vote on a question (upvote or downvote). Requires authentication.

    Voting the same type again retracts the vote.
    Voting the opposite type switches the vote.
    """
    service = VoteService(db)
    result = await service.vote(ctx, VoteTarget("question", question_id), vote.vote_type)
    await invalidate_questions_cache(cache)

    return ApiResponse(
        status="success",
        data=VoteResponse(**result.to_dict()).model_dump(mode="json"),
    )
