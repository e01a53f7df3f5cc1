"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.config import settings
from stackit.dependencies import get_db
from stackit.schemas import HealthCheckResponse
from stackit.services.cache_service import CacheService, get_cache

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Return service health status.

    Checks connectivity to:
    - Database (question/answer/vote tables)
    - Redis (listing cache and token revocations)

    A failing Redis only degrades the service; listings fall back to the
    database and sign-out cannot revoke tokens.
    """
    services = {}

    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    services["database"] = db_status

    try:
        redis_healthy = await cache.health_check()
        redis_status = "ok" if redis_healthy else "error: ping failed"
    except Exception as e:
        redis_status = f"error: {str(e)}"

    services["redis"] = redis_status

    overall_status = "ok" if all(s == "ok" for s in services.values()) else "degraded"

    return HealthCheckResponse(
        status=overall_status,
        environment=settings.ENVIRONMENT,
        database=db_status,
        redis=redis_status,
        services=services,
    )
