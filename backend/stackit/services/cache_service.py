"""Redis cache for question listings and revoked session tokens.

Every operation degrades gracefully: a Redis failure is logged and treated
as a cache miss, so the API keeps serving from the database.
"""

from typing import Optional

import structlog
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from stackit.config import settings

logger = structlog.get_logger(__name__)

QUESTION_LIST_PREFIX = "questions"
REVOKED_TOKEN_PREFIX = "revoked_token"


class CacheService:
    """Async Redis cache service with TTL support and pattern invalidation."""

    def __init__(self, redis_url: str):
        """Initialize cache service.

        Args:
            redis_url: Redis connection URL (e.g., "redis://localhost:6379/0")
        """
        self.redis_url = redis_url
        self._redis: Optional[Redis] = None
        self.logger = logger.bind(service="cache_service")

    async def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            self.logger.info("redis_connection_created", url=self.redis_url)

        return self._redis

    async def get(self, key: str) -> Optional[str]:
        """Get a value from cache, or None on a miss or error."""
        try:
            redis = await self._get_redis()
            value = await redis.get(key)
            self.logger.debug("cache_hit" if value else "cache_miss", key=key)
            return value

        except RedisError as e:
            self.logger.error(
                "cache_get_failed",
                key=key,
                error=str(e),
                exc_info=True,
            )
            return None

    async def set(self, key: str, value: str, ttl: int = 300) -> bool:
        """Set a value with a TTL in seconds. Returns False on error."""
        try:
            redis = await self._get_redis()
            await redis.set(key, value, ex=max(1, ttl))
            self.logger.debug("cache_set", key=key, ttl=ttl, value_length=len(value))
            return True

        except RedisError as e:
            self.logger.error(
                "cache_set_failed",
                key=key,
                error=str(e),
                exc_info=True,
            )
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a pattern.

        Args:
            pattern: Redis glob pattern (e.g., "questions:*")

        Returns:
            Number of keys deleted, 0 on error
        """
        try:
            redis = await self._get_redis()
            keys = [key async for key in redis.scan_iter(match=pattern, count=100)]
            deleted = await redis.delete(*keys) if keys else 0
            self.logger.info("cache_pattern_delete", pattern=pattern, keys_deleted=deleted)
            return deleted

        except RedisError as e:
            self.logger.error(
                "cache_pattern_delete_failed",
                pattern=pattern,
                error=str(e),
                exc_info=True,
            )
            return 0

    async def revoke_token(self, token_id: str, ttl: int) -> bool:
        """Remember a signed-out token id until the token would have expired."""
        return await self.set(f"{REVOKED_TOKEN_PREFIX}:{token_id}", "1", ttl=ttl)

    async def is_token_revoked(self, token_id: str) -> bool:
        return await self.get(f"{REVOKED_TOKEN_PREFIX}:{token_id}") is not None

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        try:
            redis = await self._get_redis()
            await redis.ping()
            return True

        except Exception as e:
            self.logger.error(
                "redis_health_check_failed",
                error=str(e),
                exc_info=True,
            )
            return False

    async def close(self) -> None:
        """Close the Redis connection on application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("redis_connection_closed")


# Global cache instance
_cache_instance: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get or create the global cache service instance."""
    global _cache_instance

    if _cache_instance is None:
        _cache_instance = CacheService(settings.REDIS_URL)
        logger.info("cache_service_initialized", redis_url=settings.REDIS_URL)

    return _cache_instance


async def get_cache() -> CacheService:
    """FastAPI dependency for cache service.

    Usage:
        @router.get("/endpoint")
        async def endpoint(cache: CacheService = Depends(get_cache)):
            ...
    """
    return get_cache_service()


async def invalidate_questions_cache(cache: CacheService) -> int:
    """Drop every cached question listing.

    Called after questions, answers or votes change.

    Returns:
        Number of cache keys deleted
    """
    deleted = await cache.delete_pattern(f"{QUESTION_LIST_PREFIX}:*")
    logger.info("questions_cache_invalidated", keys_deleted=deleted)
    return deleted


def cache_key_for_questions(
    page: int = 1,
    limit: int = 20,
    sort_by: str = "newest",
    tag: Optional[str] = None,
) -> str:
    """Generate cache key for the questions listing endpoint."""
    parts = [
        QUESTION_LIST_PREFIX,
        f"p{page}",
        f"l{limit}",
        f"s{sort_by}",
    ]

    if tag:
        parts.append(f"t{tag.strip().lower()}")

    return ":".join(parts)
