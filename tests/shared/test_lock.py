"""Tests for the Redis LockManager."""

from unittest.mock import AsyncMock

import pytest

from app.shared.lock import LockManager


@pytest.fixture
def mock_redis() -> AsyncMock:
    client = AsyncMock()
    client.set.return_value = True
    client.eval.return_value = 1
    return client


class TestLockManager:
    async def test_acquire_sets_owned_key(self, mock_redis):
        lock = LockManager(mock_redis, lock_prefix="lock:test", default_ttl=20, owner="me")

        assert await lock.acquire("a", 1) is True
        assert lock.lock_key == "lock:test:a:1"
        assert bool(lock) is True
        mock_redis.set.assert_awaited_once_with("lock:test:a:1", "me", nx=True, ex=20)

    async def test_acquire_retries_until_free(self, mock_redis):
        mock_redis.set.side_effect = [None, None, True]
        lock = LockManager(mock_redis, owner="me")

        assert await lock.acquire("k", blocking_timeout=1, retry_interval=0.001, jitter=0) is True
        assert mock_redis.set.await_count == 3

    async def test_acquire_times_out(self, mock_redis):
        mock_redis.set.return_value = None
        lock = LockManager(mock_redis, owner="me")

        assert await lock.acquire("k", blocking_timeout=0.01, retry_interval=0.001, jitter=0) is False
        assert bool(lock) is False

    async def test_release_is_owner_checked(self, mock_redis):
        lock = LockManager(mock_redis, owner="me")
        await lock.acquire("k")

        assert await lock.release() is True
        args = mock_redis.eval.call_args.args
        assert args[1:] == (1, "lock:k", "me")

    async def test_release_not_owned(self, mock_redis):
        mock_redis.eval.return_value = 0
        lock = LockManager(mock_redis, owner="me")
        await lock.acquire("k")

        assert await lock.release() is False

    async def test_release_without_acquire(self, mock_redis):
        lock = LockManager(mock_redis)

        assert await lock.release() is False
        mock_redis.eval.assert_not_awaited()

    async def test_context_manager_releases(self, mock_redis):
        async with LockManager(mock_redis, owner="me") as lock:
            await lock.acquire("k")

        mock_redis.eval.assert_awaited_once()


@pytest.mark.usefixtures("clear_redis")
class TestLockManagerRedis:
    """Against a real Redis (skipped unless REDIS_URL_STREAM_MAJOR is set)."""

    async def test_second_owner_waits(self, redis_client):
        first = LockManager(redis_client, owner="first")
        second = LockManager(redis_client, owner="second")

        assert await first.acquire("owner", 1) is True
        assert await second.acquire("owner", 1, blocking_timeout=0) is False

        assert await first.release() is True
        assert await second.acquire("owner", 1, blocking_timeout=0) is True
        await second.release()
