# backend/barberhub/services/slots/__init__.py
"""
Slot availability and conflict-resolution engine.

Pure computation: overlap, config, calculator, availability, aggregator,
day_range, presenter. Data access: resolver (business hours, Redis-cached)
and pipeline (bookings/blocks snapshot for one business-local day).
"""

from .config import (
    BusinessHoursConfig,
    DayHours,
    DEFAULT_BUSINESS_HOURS,
    SlotValidationError,
    InvalidBusinessHours,
    StaleSlotsError,
)
from .overlap import Interval, overlaps
from .calculator import generate_candidates
from .availability import BookedInterval, BlockedInterval, Slot, evaluate_slots
from .aggregator import ServiceRequest, ServiceSelection, SlotList, aggregate_services
from .day_range import ViewMode, select_days
from .presenter import EventBox, find_conflicts, position_event
from .resolver import resolve_business_hours
from .redis_store import BusinessHoursStore
from .invalidator import invalidate_tenant_cache
from .pipeline import calculate_slots, reschedule_slots, calendar_grid

__all__ = [
    "BusinessHoursConfig",
    "DayHours",
    "DEFAULT_BUSINESS_HOURS",
    "SlotValidationError",
    "InvalidBusinessHours",
    "StaleSlotsError",
    "Interval",
    "overlaps",
    "generate_candidates",
    "BookedInterval",
    "BlockedInterval",
    "Slot",
    "evaluate_slots",
    "ServiceRequest",
    "ServiceSelection",
    "SlotList",
    "aggregate_services",
    "ViewMode",
    "select_days",
    "EventBox",
    "find_conflicts",
    "position_event",
    "resolve_business_hours",
    "BusinessHoursStore",
    "invalidate_tenant_cache",
    "calculate_slots",
    "reschedule_slots",
    "calendar_grid",
]
