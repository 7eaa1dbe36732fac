"""Redis run lock for the daily accrual batch.

SET key token NX EX ttl: at most one run per key at a time. The TTL frees
the lock if the worker dies mid-run. Release only deletes the key while it
still holds our token, so a run that outlived its TTL cannot drop a newer
run's lock.
"""

import uuid
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis

from config.settings import settings
from src.yp_common.redis_client import get_redis

_RELEASE_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
end
return 0
"""


def accrual_lock_key(earning_date: str) -> str:
    return f"accrual:lock:{earning_date}"


class RedisRunLock:
    def __init__(
        self,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        ttl_seconds: int | None = None,
    ) -> None:
        self._redis_factory = redis_factory
        self._ttl = ttl_seconds or settings.ACCRUAL_LOCK_TTL_SECONDS

    async def acquire(self, key: str) -> str | None:
        """Return a release token, or None if another run holds the lock."""
        redis = await self._redis_factory()
        token = uuid.uuid4().hex
        acquired = await redis.set(key, token, nx=True, ex=self._ttl)
        return token if acquired else None

    async def release(self, key: str, token: str) -> None:
        redis = await self._redis_factory()
        await redis.eval(_RELEASE_SCRIPT, 1, key, token)
