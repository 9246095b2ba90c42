# backend/barberhub/schemas/slots.py
"""
Pydantic schemas for slots and calendar API.
"""

from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field


class SlotInfo(BaseModel):
    """A single candidate slot."""
    time: str  # "HH:MM"
    end: str   # "HH:MM"
    is_available: bool
    reason: str | None = Field(default=None, description="lunch / booked / blocked / past")

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """All candidate slots of a day for one professional."""
    tenant_id: int
    professional_id: int
    date: date
    service_ids: list[int]
    total_duration_min: int
    total_price: Decimal
    slots: list[SlotInfo]

    available_count: int
    is_fully_booked: bool

    model_config = {"from_attributes": True}


class RescheduleSlotsResponse(BaseModel):
    appointment_id: int
    professional_id: int
    date: date
    total_duration_min: int
    slots: list[SlotInfo]

    model_config = {"from_attributes": True}


class BookableDatesResponse(BaseModel):
    tenant_id: int
    start_date: date
    end_date: date
    dates: list[date]
    horizon_days: int

    model_config = {"from_attributes": True}


class CalendarDaysResponse(BaseModel):
    tenant_id: int
    anchor: date
    mode: str
    days: list[date]

    model_config = {"from_attributes": True}


class CalendarEvent(BaseModel):
    appointment_id: int
    professional_id: int
    status: str
    client_name: str | None = None
    start: str
    end: str
    top: float = Field(description="Offset from the top of the day column, px")
    height: float = Field(description="Never below the minimum readable height, px")
    has_conflict: bool

    model_config = {"from_attributes": True}


class CalendarDay(BaseModel):
    date: date
    is_open: bool
    open: str
    close: str
    hour_rows: list[int]
    events: list[CalendarEvent]

    model_config = {"from_attributes": True}


class CalendarGridResponse(BaseModel):
    tenant_id: int
    mode: str
    anchor: date
    step_minutes: int
    row_height: float
    days: list[CalendarDay]

    model_config = {"from_attributes": True}
