"""Per-owner mutual exclusion around the transmission slot."""

from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.shared.lock import LockManager
from app.utils.app_errors import AppErrorCode, OperationError

TRANSMISSION_LOCK_PREFIX = "lock:transmission"


class OwnerLock(Protocol):
    def hold(self, owner_id: int) -> AbstractAsyncContextManager[None]: ...


class RedisOwnerLock:
    """OwnerLock on a Redis key per owner, shared by every API worker."""

    def __init__(self, redis_client: Redis, ttl: int = 30, wait_seconds: float = 10):
        self.redis_client = redis_client
        self.ttl = ttl
        self.wait_seconds = wait_seconds

    @asynccontextmanager
    async def hold(self, owner_id: int) -> AsyncIterator[None]:
        lock = LockManager(self.redis_client, lock_prefix=TRANSMISSION_LOCK_PREFIX, default_ttl=self.ttl)
        try:
            acquired = await lock.acquire(owner_id, blocking_timeout=self.wait_seconds)
        except RedisError as e:
            logger.error("Transmission lock unavailable for owner {}: {}", owner_id, e)
            raise OperationError(
                errcode=AppErrorCode.E_LOCK_UNAVAILABLE,
                errmesg="Could not lock the transmission slot",
                error=str(e),
                details={"owner_id": owner_id},
            ) from e

        if not acquired:
            raise OperationError(
                errcode=AppErrorCode.E_TRANSMISSION_BUSY,
                errmesg="Another transmission operation is in progress for this owner",
                details={"owner_id": owner_id},
            )
        async with lock:
            yield
