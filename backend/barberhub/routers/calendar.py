# backend/barberhub/routers/calendar.py
"""
Calendar API endpoints (admin dashboard / mobile agenda).

GET /calendar/days - Days shown by a view (day / 3-day / week)
GET /calendar/grid - Positioned appointments with conflict flags
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import CalendarDaysResponse, CalendarGridResponse
from ..services.slots import ViewMode, resolve_business_hours, select_days
from ..services.slots.pipeline import calendar_grid


router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/days", response_model=CalendarDaysResponse)
def get_calendar_days(
    tenant_id: int,
    anchor: date,
    mode: ViewMode = ViewMode.WEEK,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    config = resolve_business_hours(db, tenant_id, redis)
    return CalendarDaysResponse(
        tenant_id=tenant_id,
        anchor=anchor,
        mode=mode.value,
        days=select_days(anchor, mode, config.open_weekdays),
    )


@router.get("/grid", response_model=CalendarGridResponse)
def get_calendar_grid(
    tenant_id: int,
    anchor: date,
    mode: ViewMode = ViewMode.WEEK,
    professional_id: int | None = None,
    row_height: float | None = None,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    """Appointments of the view; overlaps are flagged, never rejected."""
    if row_height is not None and row_height <= 0:
        raise HTTPException(status_code=400, detail="row_height must be positive")

    result = calendar_grid(
        db,
        tenant_id,
        anchor,
        mode,
        resource_id=professional_id,
        row_height=row_height,
        redis=redis,
    )
    return CalendarGridResponse(**result)
