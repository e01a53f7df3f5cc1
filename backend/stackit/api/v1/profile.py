"""Profile API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.dependencies import get_db, get_session_context
from stackit.schemas import ApiResponse, ProfileResponse, ProfileUpdateRequest
from stackit.services.profile_service import ProfileService

router = APIRouter()


@router.get("/me", response_model=ApiResponse)
async def get_my_profile(
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's profile."""
    profile = await ProfileService(db).get_profile(ctx)
    return ApiResponse(
        status="success",
        data=ProfileResponse.model_validate(profile).model_dump(mode="json"),
    )


@router.patch("/me", response_model=ApiResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Set or clear the caller's avatar."""
    profile = await ProfileService(db).update_avatar(ctx, body.avatar_url)
    return ApiResponse(
        status="success",
        data=ProfileResponse.model_validate(profile).model_dump(mode="json"),
    )
