# backend/barberhub/routers/slots.py
"""
Slots API endpoints.

GET /slots/day        - Every candidate slot of a day (customer booking)
GET /slots/reschedule - Slots for moving an existing appointment
GET /slots/dates      - Dates a customer may book
"""

from datetime import date, datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..config import get_now, settings
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import (
    BookableDatesResponse,
    RescheduleSlotsResponse,
    SlotInfo,
    SlotsDayResponse,
)
from ..services.slots import SlotValidationError, resolve_business_hours
from ..services.slots.aggregator import SlotList
from ..services.slots.config import calculate_end_time
from ..services.slots.day_range import bookable_dates, is_date_bookable
from ..services.slots.pipeline import calculate_slots_for_services, reschedule_slots


router = APIRouter(prefix="/slots", tags=["slots"])


def _slot_infos(slot_list: SlotList) -> list[SlotInfo]:
    return [
        SlotInfo(
            time=s.time,
            end=calculate_end_time(s.time, slot_list.total_duration),
            is_available=s.available,
            reason=s.reason,
        )
        for s in slot_list.slots
    ]


def _check_bookable(target_date: date, now: datetime) -> None:
    today = now.date()
    if target_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be in the past")
    if not is_date_bookable(target_date, today, settings.booking_horizon_days):
        raise HTTPException(
            status_code=400,
            detail=f"Date cannot be more than {settings.booking_horizon_days} days ahead",
        )


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    tenant_id: int,
    professional_id: int,
    service_ids: list[int] = Query(..., alias="service_id"),
    target_date: date = Query(..., alias="date"),
    exclude_appointment_id: int | None = None,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    now: datetime = Depends(get_now),
):
    """Get all slots for the selected services on a day, flagged available or not."""
    _check_bookable(target_date, now)

    try:
        slot_list = calculate_slots_for_services(
            db,
            tenant_id,
            professional_id,
            target_date,
            service_ids,
            now=now,
            exclude_appointment_id=exclude_appointment_id,
            include_closed_days=False,
            redis=redis,
        )
    except SlotValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if slot_list is None:
        raise HTTPException(status_code=404, detail="Service not found")

    available_count = len(slot_list.available)

    return SlotsDayResponse(
        tenant_id=tenant_id,
        professional_id=professional_id,
        date=target_date,
        service_ids=service_ids,
        total_duration_min=slot_list.total_duration,
        total_price=slot_list.selection.total_price,
        slots=_slot_infos(slot_list),
        available_count=available_count,
        is_fully_booked=available_count == 0,
    )


@router.get("/reschedule", response_model=RescheduleSlotsResponse)
def get_reschedule_slots(
    appointment_id: int,
    target_date: date = Query(..., alias="date"),
    professional_id: int | None = None,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    now: datetime = Depends(get_now),
):
    """Slots for moving an appointment; the appointment itself is not a conflict."""
    _check_bookable(target_date, now)

    try:
        slot_list = reschedule_slots(
            db,
            appointment_id,
            target_date,
            resource_id=professional_id,
            now=now,
            redis=redis,
        )
    except SlotValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if slot_list is None:
        raise HTTPException(status_code=404, detail="Appointment not found")

    return RescheduleSlotsResponse(
        appointment_id=appointment_id,
        professional_id=slot_list.resource_id,
        date=target_date,
        total_duration_min=slot_list.total_duration,
        slots=_slot_infos(slot_list),
    )


@router.get("/dates", response_model=BookableDatesResponse)
def get_bookable_dates(
    tenant_id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    now: datetime = Depends(get_now),
):
    """Open days from today up to the booking horizon."""
    config = resolve_business_hours(db, tenant_id, redis)
    today = now.date()
    horizon = settings.booking_horizon_days

    return BookableDatesResponse(
        tenant_id=tenant_id,
        start_date=today,
        end_date=today + timedelta(days=horizon),
        dates=bookable_dates(today, horizon, config.open_weekdays),
        horizon_days=horizon,
    )
