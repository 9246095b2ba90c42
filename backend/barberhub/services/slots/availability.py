# backend/barberhub/services/slots/availability.py
"""
Availability filter.

For each candidate start evaluates four independent disqualifiers:
✓ lunch break overlap
✓ existing booking overlap (same professional)
✓ blocked interval overlap (same professional or business-wide)
✓ past cutoff, only when the evaluated day is "today" in the business zone

Every candidate is returned; unavailable ones carry available=False and
a reason, so callers render them disabled instead of dropping them.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable

from .calculator import generate_candidates
from .config import (
    BusinessHoursConfig,
    DayHours,
    SlotValidationError,
    minutes_to_time_str,
    time_str_to_minutes,
)
from .overlap import Interval, overlaps

logger = logging.getLogger(__name__)

CANCELLED_STATUSES = frozenset({"cancelled"})
DEFAULT_APPOINTMENT_DURATION = 30
# Blocks stored with end == start (no duration recorded)
DEFAULT_BLOCK_DURATION = 20

REASON_LUNCH = "lunch"
REASON_BOOKED = "booked"
REASON_BLOCKED = "blocked"
REASON_PAST = "past"


@dataclass(frozen=True)
class BookedInterval(Interval):
    resource_id: int
    appointment_id: int | None = None


@dataclass(frozen=True)
class BlockedInterval(Interval):
    resource_id: int | None = None  # None = applies to every professional


@dataclass(frozen=True)
class Slot:
    start: int
    available: bool
    reason: str | None = None

    @property
    def time(self) -> str:
        return minutes_to_time_str(self.start)


def evaluate_slots(
    hours: BusinessHoursConfig | DayHours,
    total_duration: int,
    bookings: Iterable[BookedInterval] = (),
    blocks: Iterable[BlockedInterval] = (),
    *,
    resource_id: int | None = None,
    target_date: date | None = None,
    now: datetime | None = None,
) -> list[Slot]:
    """
    Generate and evaluate every candidate slot of a day.

    Args:
        hours: Tenant config (resolved per weekday via target_date) or a DayHours
        total_duration: Aggregated duration of the selected services
        bookings: Existing bookings of the day
        blocks: Administrator blocks of the day
        resource_id: Professional the slots are for; None = ignore scoping
                     of bookings, apply only business-wide blocks
        target_date: Business-local day being evaluated
        now: Current time in the business timezone; drives the "today" cutoff

    Returns:
        Chronological list of Slot, one per candidate.
    """
    if isinstance(hours, BusinessHoursConfig) and target_date is not None:
        hours = hours.for_date(target_date)

    relevant_bookings = [
        b for b in bookings
        if resource_id is None or b.resource_id == resource_id
    ]
    relevant_blocks = [
        blk for blk in blocks
        if blk.resource_id is None or blk.resource_id == resource_id
    ]

    cutoff = _cutoff_minutes(target_date, now)
    lunch = hours.lunch

    slots: list[Slot] = []
    for start in generate_candidates(hours, total_duration):
        reason = None
        if lunch and overlaps(start, total_duration, lunch[0], lunch[1] - lunch[0]):
            reason = REASON_LUNCH
        elif any(overlaps(start, total_duration, b.start, b.duration) for b in relevant_bookings):
            reason = REASON_BOOKED
        elif any(overlaps(start, total_duration, blk.start, blk.duration) for blk in relevant_blocks):
            reason = REASON_BLOCKED
        elif cutoff is not None and start <= cutoff:
            reason = REASON_PAST

        slots.append(Slot(start=start, available=reason is None, reason=reason))

    return slots


def _cutoff_minutes(target_date: date | None, now: datetime | None) -> int | None:
    """Current minutes-of-day if target_date is today, else None (no cutoff)."""
    if target_date is None or now is None:
        return None
    if now.date() != target_date:
        return None
    return now.hour * 60 + now.minute


# ── Snapshot conversion ──────────────────────────────────────────────────


def appointment_local_start(starts_at: str | datetime, tz: tzinfo) -> datetime:
    """Appointment start as a business-local datetime (naive = already local)."""
    dt = datetime.fromisoformat(starts_at) if isinstance(starts_at, str) else starts_at
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def appointment_duration(appointment) -> int:
    """Sum of the appointment's service durations."""
    total = sum(s.duration_min or 0 for s in (appointment.services or []))
    return total or DEFAULT_APPOINTMENT_DURATION


def booked_intervals_from_appointments(
    appointments: Iterable,
    tz: tzinfo,
    *,
    exclude_appointment_id: int | None = None,
) -> list[BookedInterval]:
    """
    Derive booked intervals from appointment rows.

    Skips cancelled appointments and, when rescheduling, the appointment
    being moved (otherwise it would conflict with itself).
    """
    intervals: list[BookedInterval] = []
    for appt in appointments:
        if appt.status in CANCELLED_STATUSES:
            continue
        if exclude_appointment_id is not None and appt.id == exclude_appointment_id:
            continue
        try:
            local = appointment_local_start(appt.starts_at, tz)
        except (TypeError, ValueError):
            logger.warning("Skipping appointment %s with bad starts_at=%r", appt.id, appt.starts_at)
            continue
        intervals.append(BookedInterval(
            start=local.hour * 60 + local.minute,
            duration=appointment_duration(appt),
            resource_id=appt.professional_id,
            appointment_id=appt.id,
        ))
    return intervals


def blocked_intervals_from_rows(rows: Iterable) -> list[BlockedInterval]:
    """
    Convert blocked_times rows ("HH:MM" start/end) to intervals.

    A row without a duration (end == start) blocks DEFAULT_BLOCK_DURATION
    minutes; rows ending before they start are skipped.
    """
    intervals: list[BlockedInterval] = []
    for row in rows:
        try:
            start = time_str_to_minutes(row.start_time)
            end = time_str_to_minutes(row.end_time)
        except SlotValidationError:
            logger.warning("Skipping blocked time %s with bad bounds", row.id)
            continue
        if end == start:
            end = start + DEFAULT_BLOCK_DURATION
        elif end < start:
            logger.warning(
                "Skipping blocked time %s: end %s is before start %s",
                row.id, row.end_time, row.start_time,
            )
            continue
        intervals.append(BlockedInterval(
            start=start,
            duration=end - start,
            resource_id=row.professional_id,
        ))
    return intervals
