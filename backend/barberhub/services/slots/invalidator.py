# backend/barberhub/services/slots/invalidator.py
"""
Cache invalidation for business hours.

Triggers:
✓ Tenant business hours written (PUT /business_hours/{tenant_id})
✓ Manual admin invalidation

Does NOT trigger:
✗ Appointment created/moved/cancelled (slots are never cached)
✗ Blocked time created/deleted (read fresh on every query)
"""

import logging

from redis import Redis, RedisError

from .redis_store import BusinessHoursStore

logger = logging.getLogger(__name__)


def invalidate_tenant_cache(
    redis: Redis | None,
    tenant_ids: list[int] | None = None,
) -> int:
    """
    Drop cached business hours.

    Args:
        redis: Redis client (None = caching disabled, nothing to do)
        tenant_ids: Tenants to invalidate, or None for all

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0
    try:
        return BusinessHoursStore(redis).delete(tenant_ids)
    except RedisError:
        logger.warning("Failed to invalidate business hours cache for %s", tenant_ids, exc_info=True)
        return 0
