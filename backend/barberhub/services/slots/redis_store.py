# backend/barberhub/services/slots/redis_store.py
"""
Redis cache for resolved business hours.

Key format: slots:hours:{tenant_id}
Value: JSON of BusinessHoursConfig.to_dict(), with TTL.

Slots themselves are never cached: they depend on bookings and on
"now", and are recomputed on every query.
"""

import json

from redis import Redis

from ...config import settings
from .config import BusinessHoursConfig


class BusinessHoursStore:
    """Redis storage wrapper for per-tenant business hours."""

    KEY_PREFIX = "slots:hours"

    def __init__(self, redis: Redis, ttl_seconds: int | None = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.hours_cache_ttl_seconds

    def _key(self, tenant_id: int) -> str:
        return f"{self.KEY_PREFIX}:{tenant_id}"

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, tenant_id: int) -> BusinessHoursConfig | None:
        """Cached config, or None on cache miss."""
        raw = self.redis.get(self._key(tenant_id))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        return BusinessHoursConfig.from_dict(json.loads(raw))

    # ── Write ────────────────────────────────────────────────────────────

    def put(self, tenant_id: int, config: BusinessHoursConfig) -> None:
        self.redis.setex(
            self._key(tenant_id),
            self.ttl_seconds,
            json.dumps(config.to_dict()),
        )

    # ── Delete ───────────────────────────────────────────────────────────

    def delete(self, tenant_ids: list[int] | None = None) -> int:
        """
        Delete cached configs.

        Args:
            tenant_ids: Specific tenants, or None to delete every cached tenant.

        Returns:
            Number of deleted keys.
        """
        if tenant_ids:
            keys = [self._key(tid) for tid in tenant_ids]
        else:
            keys = self.redis.keys(f"{self.KEY_PREFIX}:*")

        if not keys:
            return 0

        return self.redis.delete(*keys)
