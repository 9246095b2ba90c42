# backend/barberhub/services/slots/day_range.py
"""
Day-range selection for calendar views and booking date pickers.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Iterable

from .config import WEEKDAYS, SlotValidationError, weekday_key


class ViewMode(str, Enum):
    DAY = "day"
    THREE_DAY = "3-day"
    WEEK = "week"


def select_days(
    anchor: date,
    mode: ViewMode | str,
    open_weekdays: Iterable[str] = WEEKDAYS,
) -> list[date]:
    """
    Ordered calendar days to render for a view.

    - day:   [anchor], even if the business is closed that day
    - 3-day: [anchor - 1, anchor, anchor + 1], unfiltered
    - week:  Sunday..Saturday of anchor's week, filtered to open weekdays;
             all seven days if the filter would leave none
    """
    mode = ViewMode(mode)

    if mode is ViewMode.DAY:
        return [anchor]

    if mode is ViewMode.THREE_DAY:
        return [anchor + timedelta(days=offset) for offset in (-1, 0, 1)]

    # date.weekday(): Monday=0 … Sunday=6 → days since Sunday
    week_start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
    week = [week_start + timedelta(days=i) for i in range(7)]

    open_set = set(open_weekdays)
    filtered = [d for d in week if weekday_key(d) in open_set]
    return filtered or week


def is_date_bookable(day: date, today: date, horizon_days: int) -> bool:
    """Customers can book from today up to today + horizon_days (inclusive)."""
    return today <= day <= today + timedelta(days=horizon_days)


def bookable_dates(
    today: date,
    horizon_days: int,
    open_weekdays: Iterable[str] = WEEKDAYS,
) -> list[date]:
    """Open days a customer may pick, today..today + horizon_days."""
    if horizon_days < 0:
        raise SlotValidationError(f"horizon_days must be >= 0, got {horizon_days}")
    open_set = set(open_weekdays)
    return [
        today + timedelta(days=i)
        for i in range(horizon_days + 1)
        if weekday_key(today + timedelta(days=i)) in open_set
    ]
