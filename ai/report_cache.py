"""
Shared report cache.

Reports are keyed by the symmetric match key and kept for a week. The cache
is an optimisation only: every failure here reads as a miss or a skipped
write, never as a failed request.
"""
import asyncio
import logging
from typing import Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from core.errors import CacheUnavailable
from core.settings import DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

_CACHE_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class ReportCache(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class NullReportCache:
    """Used when no cache is configured. Always misses."""

    enabled = False

    async def get(self, key: str) -> str | None:
        return None

    async def set(self, key: str, value: str) -> None:
        return None


class RedisReportCache:
    enabled = True

    def __init__(self, client, ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS):
        self._client = client
        self.ttl_seconds = ttl_seconds

    async def _get(self, key: str) -> str | None:
        try:
            value = await self._client.get(key)
        except _CACHE_ERRORS as e:
            raise CacheUnavailable(f"cache read failed: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def get(self, key: str) -> str | None:
        try:
            return await self._get(key)
        except CacheUnavailable as e:
            logger.error("[Cache] %s", e.message)
            return None

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(key, value, ex=self.ttl_seconds)
        except _CACHE_ERRORS as e:
            logger.error("[Cache] Write failed for key %s: %s", key, e)

    async def close(self):
        await self._client.aclose()


def build_report_cache(redis_url: str | None, ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS):
    """Connect lazily; no URL means caching is disabled."""
    if not redis_url:
        logger.warning("[Cache] REDIS_URL not found, caching will be disabled.")
        return NullReportCache()

    try:
        client = aioredis.from_url(redis_url, decode_responses=True, socket_timeout=5)
    except ValueError as e:
        logger.error("[Cache] Invalid REDIS_URL, caching disabled: %s", e)
        return NullReportCache()

    logger.info("[Cache] Initialising Redis client from REDIS_URL")
    return RedisReportCache(client, ttl_seconds)
