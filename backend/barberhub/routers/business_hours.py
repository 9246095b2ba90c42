# backend/barberhub/routers/business_hours.py
# GET returns the effective config (defaults when none stored).
# PUT = upsert, validated before commit. PATCH/DELETE = 405.

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import BusinessHours as DBBusinessHours
from ..models.generated import Tenants as DBTenants
from ..redis_client import get_redis
from ..schemas.business_hours import BusinessHoursRead, BusinessHoursUpdate
from ..services.slots import SlotValidationError, invalidate_tenant_cache, resolve_business_hours
from ..services.slots.resolver import business_hours_from_row

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/business_hours", tags=["business_hours"])


@router.get("/{tenant_id}", response_model=BusinessHoursRead)
def get_business_hours(
    tenant_id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    config = resolve_business_hours(db, tenant_id, redis)
    return BusinessHoursRead(tenant_id=tenant_id, **config.to_dict())


@router.put("/{tenant_id}", response_model=BusinessHoursRead)
def put_business_hours(
    tenant_id: int,
    data: BusinessHoursUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    if not db.get(DBTenants, tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found")

    obj = (
        db.query(DBBusinessHours)
        .filter(DBBusinessHours.tenant_id == tenant_id)
        .first()
    )
    if obj is None:
        obj = DBBusinessHours(tenant_id=tenant_id)

    obj.open_time = data.open_time
    obj.close_time = data.close_time
    obj.slot_interval = data.slot_interval
    obj.open_days = json.dumps(data.open_days)
    obj.lunch_start = data.lunch_start
    obj.lunch_end = data.lunch_end
    obj.use_custom_hours = 1 if data.use_custom_hours else 0
    obj.custom_hours = json.dumps(
        {day: hours.model_dump() for day, hours in data.custom_hours.items()}
    )

    # Reject configs the slot engine would fall back from
    try:
        config = business_hours_from_row(obj)
    except (SlotValidationError, ValueError) as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"Invalid business hours: {e}")

    db.add(obj)
    db.commit()

    invalidate_tenant_cache(redis, [tenant_id])
    logger.info("Business hours updated for tenant %s", tenant_id)

    return BusinessHoursRead(tenant_id=tenant_id, **config.to_dict())


@router.patch("/{tenant_id}")
@router.delete("/{tenant_id}")
def method_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
