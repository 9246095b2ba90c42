# backend/barberhub/schemas/blocked_times.py

from datetime import date
from typing import Optional
from pydantic import BaseModel


class BlockedTimeCreate(BaseModel):
    tenant_id: int
    professional_id: Optional[int] = None  # None = whole business

    date: date
    start_time: str
    end_time: str

    kind: str = "manual"
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class BlockedTimeRead(BaseModel):
    id: int

    tenant_id: int
    professional_id: Optional[int] = None

    date: date
    start_time: str
    end_time: str

    kind: str
    reason: Optional[str] = None

    created_at: Optional[str] = None

    model_config = {"from_attributes": True}
