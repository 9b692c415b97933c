# =============================================================================
# lib/rate_limit_store.py - Sliding-Window Rate Limit Stores
# =============================================================================
# Storage backends for the sliding-window-log rate limiter:
# - MemoryRateLimitStore: per-process dict of timestamp lists (default)
# - RedisRateLimitStore: one sorted set per key, shared by every worker
#
# Both expose the same coroutine API:
#   count = await store.hit(key, now, window_seconds)
#
# hit() records the request at `now`, drops entries at or before
# `now - window_seconds`, and returns how many requests remain in the window
# (including this one). The middleware decides what to do with the count.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import math
import secrets
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class RateLimitStore(ABC):
    """Interface shared by all rate limit backends."""

    @abstractmethod
    async def hit(self, key: str, now: float, window_seconds: float) -> int:
        """Record one request for `key` and return the count inside the window."""

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MemoryRateLimitStore(RateLimitStore):
    """
    In-process store: key -> list of request timestamps.

    Keys whose window has fully expired are removed on access so the dict
    does not grow without bound for one-off clients.
    """

    def __init__(self):
        self._hits: dict[str, list[float]] = {}
        self._lock = asyncio.Lock()

    async def hit(self, key: str, now: float, window_seconds: float) -> int:
        window_start = now - window_seconds

        async with self._lock:
            recent = [ts for ts in self._hits.get(key, []) if ts > window_start]
            recent.append(now)
            self._hits[key] = recent
            self._prune(window_start)
            return len(recent)

    def _prune(self, window_start: float) -> None:
        stale = [key for key, hits in self._hits.items() if hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    async def close(self) -> None:
        self._hits.clear()

    def __len__(self) -> int:
        return len(self._hits)


class RedisRateLimitStore(RateLimitStore):
    """
    Redis-backed store using one sorted set per key.

    Members are unique per request; scores are request timestamps. The key
    expires once a full window passes with no traffic.

    Example:
        store = RedisRateLimitStore.from_url("redis://localhost:6379/0")
        count = await store.hit("ratelimit:127.0.0.1", time.time(), 60)
    """

    def __init__(self, client, prefix: str = "ratelimit:"):
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "ratelimit:") -> "RedisRateLimitStore":
        import redis.asyncio as aioredis

        return cls(aioredis.from_url(url), prefix=prefix)

    async def hit(self, key: str, now: float, window_seconds: float) -> int:
        redis_key = f"{self._prefix}{key}"
        member = f"{now}:{secrets.token_hex(4)}"

        pipeline = self._client.pipeline()
        pipeline.zremrangebyscore(redis_key, "-inf", now - window_seconds)
        pipeline.zadd(redis_key, {member: now})
        pipeline.zcard(redis_key)
        pipeline.expire(redis_key, math.ceil(window_seconds))
        _, _, count, _ = await pipeline.execute()
        return int(count)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except Exception as e:
            logger.error(f"Redis rate limit store ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis rate limit store closed")
