# backend/barberhub/services/slots/resolver.py
"""
Business hours resolution.

Never raises for business-data conditions:
- no row           → DEFAULT_BUSINESS_HOURS (expected path, logged at info)
- unreadable row   → DEFAULT_BUSINESS_HOURS (logged at warning, distinct message)
- database failure → DEFAULT_BUSINESS_HOURS (logged with traceback)
"""

import json
import logging

from redis import Redis, RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import (
    DEFAULT_BUSINESS_HOURS,
    WEEKDAYS,
    BusinessHoursConfig,
    SlotValidationError,
    day_hours_from_strings,
    normalize_time,
    parse_time_of_day,
)
from .redis_store import BusinessHoursStore

logger = logging.getLogger(__name__)

# Rows written by the first version of the dashboard use Portuguese keys
LEGACY_WEEKDAY_KEYS = {
    "dom": "sun",
    "seg": "mon",
    "ter": "tue",
    "qua": "wed",
    "qui": "thu",
    "sex": "fri",
    "sab": "sat",
}


def resolve_business_hours(
    db: Session,
    tenant_id: int,
    redis: Redis | None = None,
) -> BusinessHoursConfig:
    """
    Get the tenant's business hours, falling back to defaults.

    Uses the Redis cache when a client is given; cache errors fall
    through to the database.
    """
    store = BusinessHoursStore(redis) if redis is not None else None

    if store is not None:
        try:
            cached = store.get(tenant_id)
        except (
            RedisError, SlotValidationError, ValueError, KeyError, TypeError, AttributeError,
        ):
            logger.warning("Business hours cache read failed for tenant %s", tenant_id, exc_info=True)
            cached = None
        if cached is not None:
            return cached

    try:
        row = _get_business_hours_row(db, tenant_id)
    except SQLAlchemyError:
        logger.exception("Failed to load business hours for tenant %s, using defaults", tenant_id)
        return DEFAULT_BUSINESS_HOURS

    if row is None:
        logger.info("No business hours configured for tenant %s, using defaults", tenant_id)
        config = DEFAULT_BUSINESS_HOURS
    else:
        try:
            config = business_hours_from_row(row)
        except (SlotValidationError, ValueError, TypeError) as e:
            logger.warning(
                "Invalid business hours for tenant %s (%s), using defaults", tenant_id, e
            )
            config = DEFAULT_BUSINESS_HOURS

    if store is not None:
        try:
            store.put(tenant_id, config)
        except RedisError:
            logger.warning("Business hours cache write failed for tenant %s", tenant_id, exc_info=True)

    return config


def business_hours_from_row(row) -> BusinessHoursConfig:
    """
    Build a config from a business_hours row.

    Raises:
        SlotValidationError / ValueError on malformed data.
    """
    open_time = normalize_time(row.open_time) or "08:00"
    close_time = normalize_time(row.close_time) or "20:00"
    step = row.slot_interval or DEFAULT_BUSINESS_HOURS.step_minutes

    return BusinessHoursConfig(
        # Only the hour part of open/close is significant
        open_hour=int(open_time.split(":")[0]),
        close_hour=int(close_time.split(":")[0]),
        step_minutes=step,
        open_weekdays=parse_open_days(row.open_days),
        lunch_start=parse_time_of_day(row.lunch_start),
        lunch_end=parse_time_of_day(row.lunch_end),
        weekday_overrides=(
            parse_custom_hours(row.custom_hours, step) if row.use_custom_hours else {}
        ),
    )


def parse_open_days(raw: str | list | None) -> frozenset[str]:
    """Open weekdays from JSON ('["mon","tue"]') or a list; legacy keys mapped."""
    if raw is None or raw == "":
        return DEFAULT_BUSINESS_HOURS.open_weekdays
    days = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(days, list):
        raise SlotValidationError(f"open_days must be a list, got {type(days).__name__}")
    return frozenset(LEGACY_WEEKDAY_KEYS.get(d, d) for d in days)


def parse_custom_hours(raw: str | dict | None, step_minutes: int) -> dict:
    """
    Per-weekday custom windows.

    Format:
    {
      "sat": {"open": "09:00", "close": "14:00"},
      "fri": {"open": "10:00", "close": "22:00", "lunch_start": "15:00", "lunch_end": "16:00"}
    }
    Legacy keys (abertura/fechamento/almoco_inicio/almoco_fim, "sab"...) are accepted.
    """
    if not raw:
        return {}
    data = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(data, dict):
        raise SlotValidationError("custom_hours must be an object")

    overrides = {}
    for day, hours in data.items():
        day = LEGACY_WEEKDAY_KEYS.get(day, day)
        if day not in WEEKDAYS:
            raise SlotValidationError(f"unknown weekday in custom_hours: {day!r}")
        if not hours:
            continue
        if not isinstance(hours, dict):
            raise SlotValidationError(f"custom_hours[{day!r}] must be an object")
        open_time = hours.get("open") or hours.get("abertura")
        close_time = hours.get("close") or hours.get("fechamento")
        if not open_time or not close_time:
            continue
        overrides[day] = day_hours_from_strings(
            open_time,
            close_time,
            step_minutes,
            hours.get("lunch_start") or hours.get("almoco_inicio"),
            hours.get("lunch_end") or hours.get("almoco_fim"),
        )
    return overrides


def _get_business_hours_row(db: Session, tenant_id: int):
    """Get business_hours row for tenant."""
    from ...models.generated import BusinessHours
    return db.query(BusinessHours).filter(BusinessHours.tenant_id == tenant_id).first()
