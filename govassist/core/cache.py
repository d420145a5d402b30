"""Redis-backed response cache used by the AI service."""

from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from govassist.core.config import RedisSettings
from govassist.core.exceptions import CacheError
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ResponseCache:
    """Thin async wrapper over a Redis client.

    Every Redis failure is re-raised as ``CacheError`` so callers can decide
    whether a cache outage is fatal to them.
    """

    def __init__(self, client: Redis):
        self.client = client

    @classmethod
    def from_settings(cls, redis_settings: RedisSettings) -> "ResponseCache":
        client = Redis.from_url(
            redis_settings.url,
            decode_responses=True,
            socket_timeout=redis_settings.socket_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.client.get(key)
        except RedisError as e:
            raise CacheError(f"Cache read failed for {key}", original_error=e) from e

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        try:
            await self.client.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheError(f"Cache write failed for {key}", original_error=e) from e

    async def keys(self, pattern: str) -> list[str]:
        try:
            return list(await self.client.keys(pattern))
        except RedisError as e:
            raise CacheError(f"Cache scan failed for {pattern}", original_error=e) from e

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching ``pattern``.

        Returns:
            Number of keys removed
        """
        keys = await self.keys(pattern)
        if not keys:
            return 0
        try:
            return int(await self.client.delete(*keys))
        except RedisError as e:
            raise CacheError(f"Cache delete failed for {pattern}", original_error=e) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            LOGGER.warning("Redis ping failed", extra={"error": str(e)})
            return False

    async def close(self) -> None:
        try:
            await self.client.aclose()
            LOGGER.info("Redis connection closed")
        except RedisError as e:
            LOGGER.error("Error closing Redis connection", exc_info=True, extra={"error": str(e)})

