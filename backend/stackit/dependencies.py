"""FastAPI dependency injection providers."""

from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.db.session import async_session_factory
from stackit.services.auth_service import AuthService
from stackit.services.cache_service import CacheService, get_cache

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for request-scoped usage.

    The session is automatically committed on success or rolled back on error.
    Always closed after the request completes.

    Usage:
        @router.get("/questions")
        async def list_questions(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Question))
            return result.scalars().all()
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> SessionContext:
    """Resolve the bearer token into a SessionContext.

    Never raises: anonymous callers get a context without a user, and each
    service operation decides whether it needs one.
    """
    token = credentials.credentials if credentials else None
    service = AuthService(db, cache)
    return await service.resolve_session(token)
