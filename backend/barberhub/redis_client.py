# backend/barberhub/redis_client.py
"""
Shared Redis client.

None when REDIS_URL is not configured; callers then skip the cache
and read straight from the database.
"""

from redis import Redis

from .config import settings

redis_client: Redis | None = (
    Redis.from_url(settings.redis_url, decode_responses=True)
    if settings.redis_url
    else None
)


def get_redis() -> Redis | None:
    """FastAPI dependency returning the shared client (or None)."""
    return redis_client
