"""
Distributed lock.

Redis SET NX EX lock with an owner token so only the holder releases it.
Without a Redis client the lock degrades to a process-local asyncio.Lock
per key, which is enough for tests and single-process runs.
"""

import asyncio
import uuid
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger

# Compare-and-delete so an expired lock taken by another worker survives
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

_LOCK_PREFIX = "lock:"
_POLL_INTERVAL = 0.1

# asyncio.Lock binds to one event loop, so local locks are kept per loop
_local_locks: weakref.WeakKeyDictionary[
    asyncio.AbstractEventLoop, dict[str, asyncio.Lock]
] = weakref.WeakKeyDictionary()


class DistributedLock:
    """
    Keyed lock shared between dramatiq workers.

    Usage:
        lock = DistributedLock(redis_client=redis_client)
        async with lock.lock("scout_payout:42", timeout=120) as acquired:
            if not acquired:
                return
            ...
    """

    def __init__(self, redis_client: Any | None = None) -> None:
        """
        Initialize lock.

        Args:
            redis_client: redis.asyncio client, or None for local locks
        """
        self.redis_client = redis_client

    @asynccontextmanager
    async def lock(
        self,
        key: str,
        timeout: int = 60,
        blocking: bool = True,
        blocking_timeout: float | None = None,
    ) -> AsyncIterator[bool]:
        """
        Acquire lock for the duration of the block.

        Args:
            key: Lock key
            timeout: Lock expiry in seconds (Redis only)
            blocking: Wait for the lock instead of failing fast
            blocking_timeout: Max seconds to wait (None waits for timeout)

        Yields:
            True if the lock was acquired, False otherwise
        """
        if self.redis_client is None:
            async with self._local_lock(key, blocking, blocking_timeout) as acquired:
                yield acquired
            return

        redis_key = f"{_LOCK_PREFIX}{key}"
        token = uuid.uuid4().hex
        acquired = await self._acquire_redis(
            redis_key, token, timeout, blocking, blocking_timeout
        )

        if not acquired:
            logger.debug(f"Lock {key} is held elsewhere")

        try:
            yield acquired
        finally:
            if acquired:
                await self._release_redis(redis_key, token)

    async def _acquire_redis(
        self,
        redis_key: str,
        token: str,
        timeout: int,
        blocking: bool,
        blocking_timeout: float | None,
    ) -> bool:
        wait_limit = timeout if blocking_timeout is None else blocking_timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + wait_limit

        while True:
            result = await self.redis_client.set(
                redis_key, token, nx=True, ex=timeout
            )
            if result:
                return True
            if not blocking or loop.time() >= deadline:
                return False
            await asyncio.sleep(_POLL_INTERVAL)

    async def _release_redis(self, redis_key: str, token: str) -> None:
        try:
            await self.redis_client.eval(_RELEASE_SCRIPT, 1, redis_key, token)
        except Exception as e:
            # Key expires on its own after timeout
            logger.warning(f"Failed to release lock {redis_key}: {e}")

    @asynccontextmanager
    async def _local_lock(
        self,
        key: str,
        blocking: bool,
        blocking_timeout: float | None,
    ) -> AsyncIterator[bool]:
        loop_locks = _local_locks.setdefault(asyncio.get_running_loop(), {})
        local = loop_locks.setdefault(key, asyncio.Lock())

        if not blocking and local.locked():
            yield False
            return

        try:
            if blocking_timeout is None:
                await local.acquire()
            else:
                await asyncio.wait_for(local.acquire(), blocking_timeout)
        except TimeoutError:
            yield False
            return

        try:
            yield True
        finally:
            local.release()
