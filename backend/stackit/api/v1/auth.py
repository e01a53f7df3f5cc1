"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.dependencies import get_db, get_session_context
from stackit.models.user import User
from stackit.schemas.auth import (
    LoginRequest,
    SessionResponse,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from stackit.schemas.common import ApiResponse
from stackit.schemas.profile import ProfileResponse
from stackit.services.auth_service import AuthService, create_access_token
from stackit.services.cache_service import CacheService, get_cache

router = APIRouter()


def _session_payload(user: User, token: str) -> dict:
    profile = user.profile
    return {
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
        "profile": ProfileResponse.model_validate(profile).model_dump(mode="json") if profile else None,
        "token": TokenResponse(access_token=token).model_dump(),
    }


@router.post("/signup", response_model=ApiResponse, status_code=201)
async def sign_up(body: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """Create an account. Password and confirmation must match."""
    service = AuthService(db)
    user = await service.sign_up(email=body.email, password=body.password)

    token = create_access_token(user.id)
    return ApiResponse(status="success", data=_session_payload(user, token))


@router.post("/login", response_model=ApiResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    service = AuthService(db)
    user = await service.sign_in(email=body.email, password=body.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login credentials",
        )

    token = create_access_token(user.id)
    return ApiResponse(status="success", data=_session_payload(user, token))


@router.post("/logout", response_model=ApiResponse)
async def logout(
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Sign out. The presented token stops working immediately."""
    service = AuthService(db, cache)
    revoked = await service.sign_out(ctx)
    return ApiResponse(status="success", data={"signed_out": True, "revoked": revoked})


@router.get("/session", response_model=ApiResponse)
async def get_session(ctx: SessionContext = Depends(get_session_context)):
    """Get the current session, or null when not signed in."""
    if not ctx.is_authenticated:
        return ApiResponse(status="success", data=None)

    user = ctx.user
    session = SessionResponse(
        user=UserResponse.model_validate(user),
        profile=ProfileResponse.model_validate(user.profile) if user.profile else None,
        expires_at=ctx.expires_at,
    )
    return ApiResponse(status="success", data=session.model_dump(mode="json"))
