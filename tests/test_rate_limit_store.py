# =============================================================================
# tests/test_rate_limit_store.py - Rate Limit Store Tests
# =============================================================================
# Tests the in-memory sliding window and the Redis pipeline calls (with a
# mocked client; no Redis server needed).
# =============================================================================

import asyncio
from unittest.mock import AsyncMock, MagicMock

from lib.rate_limit_store import MemoryRateLimitStore, RedisRateLimitStore


class TestMemoryRateLimitStore:
    """Tests for MemoryRateLimitStore."""

    def test_counts_hits_inside_window(self):
        store = MemoryRateLimitStore()

        async def scenario():
            return [await store.hit("client", now, 60) for now in (0, 10, 20)]

        assert asyncio.run(scenario()) == [1, 2, 3]

    def test_old_hits_leave_the_window(self):
        store = MemoryRateLimitStore()

        async def scenario():
            await store.hit("client", 0, 60)
            await store.hit("client", 30, 60)
            # t=60: the hit at t=0 is exactly one window old and drops out
            return await store.hit("client", 60, 60)

        assert asyncio.run(scenario()) == 2

    def test_keys_are_independent(self):
        store = MemoryRateLimitStore()

        async def scenario():
            await store.hit("a", 0, 60)
            return await store.hit("b", 0, 60)

        assert asyncio.run(scenario()) == 1

    def test_expired_keys_are_pruned(self):
        store = MemoryRateLimitStore()

        async def scenario():
            await store.hit("a", 0, 60)
            await store.hit("b", 100, 60)

        asyncio.run(scenario())

        assert len(store) == 1

    def test_close_clears_state(self):
        store = MemoryRateLimitStore()

        async def scenario():
            await store.hit("a", 0, 60)
            await store.close()

        asyncio.run(scenario())

        assert len(store) == 0


class TestRedisRateLimitStore:
    """Tests for RedisRateLimitStore with a mocked client."""

    def make_store(self, count: int = 3):
        pipeline = MagicMock()
        pipeline.execute = AsyncMock(return_value=[0, 1, count, True])
        client = MagicMock()
        client.pipeline.return_value = pipeline
        return RedisRateLimitStore(client), client, pipeline

    def test_hit_runs_sliding_window_pipeline(self):
        # Arrange
        store, _, pipeline = self.make_store(count=3)

        # Act
        count = asyncio.run(store.hit("127.0.0.1", 100.0, 60))

        # Assert
        assert count == 3
        pipeline.zremrangebyscore.assert_called_once_with("ratelimit:127.0.0.1", "-inf", 40.0)
        pipeline.zcard.assert_called_once_with("ratelimit:127.0.0.1")
        pipeline.expire.assert_called_once_with("ratelimit:127.0.0.1", 60)

        key, mapping = pipeline.zadd.call_args.args
        assert key == "ratelimit:127.0.0.1"
        assert list(mapping.values()) == [100.0]

    def test_members_are_unique(self):
        store, _, pipeline = self.make_store()

        async def scenario():
            await store.hit("k", 1.0, 60)
            await store.hit("k", 1.0, 60)

        asyncio.run(scenario())

        first, second = (call.args[1] for call in pipeline.zadd.call_args_list)
        assert first.keys() != second.keys()

    def test_ping_failure_reports_unhealthy(self):
        store, client, _ = self.make_store()
        client.ping = AsyncMock(side_effect=ConnectionError("refused"))

        assert asyncio.run(store.ping()) is False

    def test_ping_success(self):
        store, client, _ = self.make_store()
        client.ping = AsyncMock(return_value=True)

        assert asyncio.run(store.ping()) is True

    def test_close(self):
        store, client, _ = self.make_store()
        client.aclose = AsyncMock()

        asyncio.run(store.close())

        client.aclose.assert_awaited_once()
