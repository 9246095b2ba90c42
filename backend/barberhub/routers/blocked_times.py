# backend/barberhub/routers/blocked_times.py
# PATCH = 405, DELETE = ALLOWED (hard)

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import BlockedTimes as DBBlockedTimes
from ..schemas.blocked_times import (
    BlockedTimeCreate,
    BlockedTimeRead,
)
from ..services.slots import SlotValidationError
from ..services.slots.config import normalize_time, time_str_to_minutes

router = APIRouter(prefix="/blocked_times", tags=["blocked_times"])


@router.get("/", response_model=list[BlockedTimeRead])
def list_blocked_times(
    tenant_id: int,
    on_date: date | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBBlockedTimes).filter(DBBlockedTimes.tenant_id == tenant_id)
    if on_date is not None:
        query = query.filter(DBBlockedTimes.date == on_date.isoformat())
    return query.order_by(DBBlockedTimes.date, DBBlockedTimes.start_time).all()


@router.get("/{id}", response_model=BlockedTimeRead)
def get_blocked_time(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBlockedTimes, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/", response_model=BlockedTimeRead, status_code=status.HTTP_201_CREATED
)
def create_blocked_time(
    data: BlockedTimeCreate,
    db: Session = Depends(get_db),
):
    try:
        start = normalize_time(data.start_time)
        end = normalize_time(data.end_time)
        if not start or not end:
            raise SlotValidationError("start_time and end_time are required")
        if time_str_to_minutes(end) <= time_str_to_minutes(start):
            raise SlotValidationError("end_time must be after start_time")
    except SlotValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    payload = data.model_dump()
    payload.update(date=data.date.isoformat(), start_time=start, end_time=end)

    obj = DBBlockedTimes(**payload)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blocked_time(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBlockedTimes, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(obj)
    db.commit()
