"""Redis connection utilities.

Shared by the dramatiq broker and the job-level distributed locks.
"""

import redis.asyncio as redis

from app.config.settings import settings


async def get_redis_client() -> redis.Redis:
    """
    Create a Redis client for distributed locks.

    Returns:
        redis.Redis: Client with decode_responses=True

    Example:
        >>> redis_client = await get_redis_client()
        >>> lock = DistributedLock(redis_client=redis_client)
    """
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        decode_responses=True,
    )


def get_redis_url_masked() -> str:
    """
    Build Redis URL with the password masked, for logging.

    Returns:
        str: redis://[:****@]host:port/db
    """
    auth = ":****@" if settings.redis_password else ""
    return (
        f"redis://{auth}{settings.redis_host}:"
        f"{settings.redis_port}/{settings.redis_db}"
    )
