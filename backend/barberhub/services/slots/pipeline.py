# backend/barberhub/services/slots/pipeline.py
"""
Slot query pipeline.

    resolve business hours
      → fetch bookings + blocks for the exact business-local day
      → aggregate selected services
      → generate candidates + evaluate availability

The result is an advisory snapshot: nothing here re-checks for bookings
written between computing slots and committing one. Double-booking must
be rejected by the storage layer.
"""

from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal

from redis import Redis
from sqlalchemy.orm import Session, selectinload

from ...config import settings
from .aggregator import (
    ServiceRequest,
    ServiceSelection,
    SlotList,
    aggregate_services,
    service_requests_from_rows,
)
from .availability import (
    BookedInterval,
    appointment_duration,
    appointment_local_start,
    blocked_intervals_from_rows,
    booked_intervals_from_appointments,
    evaluate_slots,
)
from .config import minutes_to_time_str
from .day_range import ViewMode, select_days
from .presenter import conflicting_appointment_ids, position_event
from .resolver import resolve_business_hours


def calculate_slots(
    db: Session,
    tenant_id: int,
    resource_id: int,
    target_date: date,
    services: list[ServiceRequest] | ServiceSelection,
    *,
    now: datetime | None = None,
    exclude_appointment_id: int | None = None,
    include_closed_days: bool = True,
    redis: Redis | None = None,
) -> SlotList:
    """
    Compute every candidate slot of ``target_date`` for one professional.

    Args:
        services: Selected services (aggregated here) or a ready selection
        now: Current time; converted to the business timezone
        exclude_appointment_id: Appointment being rescheduled
        include_closed_days: False for customer booking; closed weekdays
                             then yield no slots at all
    """
    tz = settings.tzinfo
    now = _to_business_time(now or settings.now(), tz)

    config = resolve_business_hours(db, tenant_id, redis)
    selection = services if isinstance(services, ServiceSelection) else aggregate_services(services)

    if not include_closed_days and not config.is_open_on(target_date):
        return SlotList(selection=selection, slots=(), resource_id=resource_id)

    bookings = booked_intervals_from_appointments(
        _get_day_appointments(db, tenant_id, target_date, tz, resource_id),
        tz,
        exclude_appointment_id=exclude_appointment_id,
    )
    blocks = blocked_intervals_from_rows(
        _get_day_blocks(db, tenant_id, target_date, resource_id)
    )

    slots = evaluate_slots(
        config,
        selection.total_duration,
        bookings,
        blocks,
        resource_id=resource_id,
        target_date=target_date,
        now=now,
    )
    return SlotList(selection=selection, slots=tuple(slots), resource_id=resource_id)


def calculate_slots_for_services(
    db: Session,
    tenant_id: int,
    resource_id: int,
    target_date: date,
    service_ids: list[int],
    **kwargs,
) -> SlotList | None:
    """
    Same as calculate_slots, loading services by id.

    Returns None if any service is unknown or inactive for the tenant.
    """
    rows = _get_services(db, tenant_id, service_ids)
    by_id = {row.id: row for row in rows}
    if not service_ids or any(sid not in by_id for sid in service_ids):
        return None
    # Same service picked twice counts twice
    requests = service_requests_from_rows(by_id[sid] for sid in service_ids)
    return calculate_slots(db, tenant_id, resource_id, target_date, requests, **kwargs)


def reschedule_slots(
    db: Session,
    appointment_id: int,
    target_date: date,
    *,
    resource_id: int | None = None,
    now: datetime | None = None,
    redis: Redis | None = None,
) -> SlotList | None:
    """
    Slots for moving an appointment to ``target_date`` (and optionally
    another professional). The appointment itself is excluded from the
    bookings so it does not conflict with its own current time.

    Returns None if the appointment does not exist.
    """
    appt = _get_appointment(db, appointment_id)
    if not appt:
        return None

    requests = service_requests_from_rows(appt.services)
    if requests:
        selection = aggregate_services(requests)
    else:
        selection = ServiceSelection(
            total_duration=appointment_duration(appt),
            total_price=Decimal("0"),
        )
    return calculate_slots(
        db,
        appt.tenant_id,
        resource_id or appt.professional_id,
        target_date,
        selection,
        now=now,
        exclude_appointment_id=appt.id,
        redis=redis,
    )


def calendar_grid(
    db: Session,
    tenant_id: int,
    anchor: date,
    mode: ViewMode | str,
    *,
    resource_id: int | None = None,
    row_height: float | None = None,
    min_height: float | None = None,
    redis: Redis | None = None,
) -> dict:
    """
    Positioned events for a calendar view.

    Returns:
        Dict for CalendarGridResponse.
    """
    tz = settings.tzinfo
    row_height = row_height or settings.calendar_row_height
    min_height = min_height or settings.calendar_min_event_height

    config = resolve_business_hours(db, tenant_id, redis)
    days = select_days(anchor, mode, config.open_weekdays)

    columns = []
    for day in days:
        hours = config.for_date(day)
        appointments = {
            a.id: a
            for a in _get_day_appointments(db, tenant_id, day, tz, resource_id)
        }
        bookings = booked_intervals_from_appointments(appointments.values(), tz)
        conflicts = conflicting_appointment_ids(bookings)

        events = []
        for booking in sorted(bookings, key=_grid_order):
            box = position_event(
                booking.start,
                booking.duration,
                hours.open_minutes,
                hours.step_minutes,
                row_height,
                min_height,
            )
            appt = appointments[booking.appointment_id]
            events.append({
                "appointment_id": booking.appointment_id,
                "professional_id": booking.resource_id,
                "status": appt.status,
                "client_name": appt.client_name,
                "start": minutes_to_time_str(booking.start),
                "end": minutes_to_time_str(booking.end),
                "top": box.top,
                "height": box.height,
                "has_conflict": booking.appointment_id in conflicts,
            })

        columns.append({
            "date": day,
            "is_open": config.is_open_on(day),
            "open": minutes_to_time_str(hours.open_minutes),
            "close": minutes_to_time_str(hours.close_minutes),
            "hour_rows": hours.hour_rows(),
            "events": events,
        })

    return {
        "tenant_id": tenant_id,
        "mode": ViewMode(mode).value,
        "anchor": anchor,
        "step_minutes": config.step_minutes,
        "row_height": row_height,
        "days": columns,
    }


def _grid_order(booking: BookedInterval) -> tuple:
    return booking.start, booking.resource_id, booking.appointment_id or 0


def _to_business_time(now: datetime, tz: tzinfo) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


# ── Database helpers ─────────────────────────────────────────────────────


def _get_services(db: Session, tenant_id: int, service_ids: list[int]) -> list:
    """Get active services of tenant by ids."""
    from ...models.generated import Services
    if not service_ids:
        return []
    return (
        db.query(Services)
        .filter(
            Services.tenant_id == tenant_id,
            Services.id.in_(set(service_ids)),
            Services.is_active == 1,
        )
        .all()
    )


def _get_appointment(db: Session, appointment_id: int):
    from ...models.generated import Appointments
    return (
        db.query(Appointments)
        .options(selectinload(Appointments.services))
        .filter(Appointments.id == appointment_id)
        .first()
    )


def _get_day_appointments(
    db: Session,
    tenant_id: int,
    target_date: date,
    tz: tzinfo,
    resource_id: int | None = None,
) -> list:
    """
    Appointments whose start falls on target_date in the business timezone.

    starts_at is stored with arbitrary offsets, so the SQL range is widened
    by a day on each side and the exact bucketing is done here.
    """
    from ...models.generated import Appointments

    query = (
        db.query(Appointments)
        .options(selectinload(Appointments.services))
        .filter(
            Appointments.tenant_id == tenant_id,
            Appointments.starts_at >= (target_date - timedelta(days=1)).isoformat(),
            Appointments.starts_at < (target_date + timedelta(days=2)).isoformat(),
        )
    )
    if resource_id is not None:
        query = query.filter(Appointments.professional_id == resource_id)

    result = []
    for appt in query.all():
        try:
            local = appointment_local_start(appt.starts_at, tz)
        except (TypeError, ValueError):
            continue
        if local.date() == target_date:
            result.append(appt)
    return result


def _get_day_blocks(
    db: Session,
    tenant_id: int,
    target_date: date,
    resource_id: int | None = None,
) -> list:
    """Blocked times on date, business-wide or for the professional."""
    from ...models.generated import BlockedTimes

    query = db.query(BlockedTimes).filter(
        BlockedTimes.tenant_id == tenant_id,
        BlockedTimes.date == target_date.isoformat(),
    )
    if resource_id is not None:
        query = query.filter(
            (BlockedTimes.professional_id.is_(None))
            | (BlockedTimes.professional_id == resource_id)
        )
    return query.all()
