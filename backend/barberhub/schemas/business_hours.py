# backend/barberhub/schemas/business_hours.py

from typing import Optional
from pydantic import BaseModel, Field


class DayHoursSchema(BaseModel):
    open: str
    close: str
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


class BusinessHoursUpdate(BaseModel):
    open_time: str = Field(examples=["08:00"])
    close_time: str = Field(examples=["20:00"])
    slot_interval: int = Field(gt=0)
    open_days: list[str] = ["mon", "tue", "wed", "thu", "fri", "sat"]
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    use_custom_hours: bool = False
    custom_hours: dict[str, DayHoursSchema] = {}

    model_config = {"from_attributes": True}


class BusinessHoursRead(BaseModel):
    """Effective (resolved) configuration, defaults when nothing is stored."""
    tenant_id: int
    open_hour: int
    close_hour: int
    step_minutes: int
    open_weekdays: list[str]
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    weekday_overrides: dict[str, DayHoursSchema] = {}

    model_config = {"from_attributes": True}
