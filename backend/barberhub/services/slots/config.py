# backend/barberhub/services/slots/config.py
"""
Business hours configuration for slots calculation.

All interval math is done in minutes-of-day (0..1440) against a single
business-local day; the calendar date only matters for weekday lookups
and the "today" cutoff.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Mapping


# date.weekday(): 0 = Monday, 6 = Sunday
WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
ALL_WEEKDAYS = frozenset(WEEKDAYS)

MINUTES_PER_DAY = 24 * 60


class SlotValidationError(ValueError):
    """Programmer-error input to the slot engine (bad duration, bad hours...)."""


class InvalidBusinessHours(SlotValidationError):
    """Business hours that cannot produce a sane slot grid."""


class StaleSlotsError(SlotValidationError):
    """A slot list is being reused for a different service duration."""


# ── Time helpers ─────────────────────────────────────────────────────────


def normalize_time(value: str | None) -> str | None:
    """
    Normalize "HH:MM" / "HH:MM:SS" / " H:MM " to "HH:MM".

    Returns None for empty values.
    """
    if value is None:
        return None
    cleaned = str(value).strip()
    if not cleaned:
        return None
    parts = cleaned.split(":")
    if len(parts) < 2:
        raise SlotValidationError(f"Invalid time value: {value!r}")
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        raise SlotValidationError(f"Invalid time value: {value!r}") from None
    if not (0 <= hour <= 24 and 0 <= minute <= 59) or (hour == 24 and minute):
        raise SlotValidationError(f"Invalid time value: {value!r}")
    return f"{hour:02d}:{minute:02d}"


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" (or "HH:MM:SS") to minutes-of-day."""
    normalized = normalize_time(value)
    if normalized is None:
        raise SlotValidationError("Empty time value")
    hour, minute = normalized.split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes-of-day to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def calculate_end_time(start: str, duration_minutes: int) -> str:
    """End time "HH:MM" of a service starting at ``start``."""
    return minutes_to_time_str(time_str_to_minutes(start) + duration_minutes)


def weekday_key(day: date) -> str:
    return WEEKDAYS[day.weekday()]


# ── Effective hours for one day ──────────────────────────────────────────


@dataclass(frozen=True)
class DayHours:
    """
    Operating window of a single day, in minutes-of-day.

    Produced by BusinessHoursConfig.for_date(); this is what the slot
    generator and availability filter actually run on.
    """
    open_minutes: int
    close_minutes: int
    step_minutes: int
    lunch_start_minutes: int | None = None
    lunch_end_minutes: int | None = None

    def __post_init__(self):
        _validate_window(
            self.open_minutes,
            self.close_minutes,
            self.step_minutes,
            self.lunch_start_minutes,
            self.lunch_end_minutes,
        )

    @property
    def lunch(self) -> tuple[int, int] | None:
        if self.lunch_start_minutes is None:
            return None
        return self.lunch_start_minutes, self.lunch_end_minutes

    def hour_rows(self) -> list[int]:
        """Hours labelled on the calendar grid, opening hour..closing hour inclusive."""
        return list(range(self.open_minutes // 60, -(-self.close_minutes // 60) + 1))


def _validate_window(
    open_minutes: int,
    close_minutes: int,
    step_minutes: int,
    lunch_start: int | None,
    lunch_end: int | None,
) -> None:
    if not (0 <= open_minutes < MINUTES_PER_DAY):
        raise InvalidBusinessHours(f"open time out of range: {open_minutes} min")
    if not (0 < close_minutes <= MINUTES_PER_DAY):
        raise InvalidBusinessHours(f"close time out of range: {close_minutes} min")
    if close_minutes <= open_minutes:
        raise InvalidBusinessHours(
            f"close time {minutes_to_time_str(close_minutes)} must be after "
            f"open time {minutes_to_time_str(open_minutes)}"
        )
    if step_minutes <= 0:
        raise InvalidBusinessHours(f"step_minutes must be positive, got {step_minutes}")
    if (lunch_start is None) != (lunch_end is None):
        raise InvalidBusinessHours("lunch start and end must both be set or both be empty")
    if lunch_start is not None:
        if lunch_start >= lunch_end:
            raise InvalidBusinessHours(
                f"lunch start {minutes_to_time_str(lunch_start)} must be before "
                f"lunch end {minutes_to_time_str(lunch_end)}"
            )
        if lunch_start < open_minutes or lunch_end >= close_minutes:
            raise InvalidBusinessHours("lunch break must fall within business hours")


# ── Tenant configuration ─────────────────────────────────────────────────


@dataclass(frozen=True)
class BusinessHoursConfig:
    """
    Operating-hours configuration of a tenant.

    Attributes:
        open_hour: Opening hour (0-23)
        close_hour: Closing hour (1-23, > open_hour)
        step_minutes: Grid step between candidate slots
        open_weekdays: Subset of WEEKDAYS the business works on
        lunch_start / lunch_end: Optional lunch break (both or neither)
        weekday_overrides: Per-weekday custom windows, e.g. shorter Saturdays
    """
    open_hour: int = 8
    close_hour: int = 20
    step_minutes: int = 20
    open_weekdays: frozenset[str] = frozenset(WEEKDAYS[:6])
    lunch_start: time | None = None
    lunch_end: time | None = None
    weekday_overrides: Mapping[str, DayHours] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if not (0 <= self.open_hour <= 23 and 0 <= self.close_hour <= 23):
            raise InvalidBusinessHours(
                f"hours must be within 0-23, got {self.open_hour}-{self.close_hour}"
            )
        unknown = set(self.open_weekdays) - ALL_WEEKDAYS
        if unknown:
            raise InvalidBusinessHours(f"unknown weekdays: {sorted(unknown)}")
        unknown = set(self.weekday_overrides) - ALL_WEEKDAYS
        if unknown:
            raise InvalidBusinessHours(f"unknown weekdays in overrides: {sorted(unknown)}")
        _validate_window(
            self.open_minutes,
            self.close_minutes,
            self.step_minutes,
            self._lunch_start_minutes,
            self._lunch_end_minutes,
        )

    @property
    def open_minutes(self) -> int:
        return self.open_hour * 60

    @property
    def close_minutes(self) -> int:
        return self.close_hour * 60

    @property
    def _lunch_start_minutes(self) -> int | None:
        return time_to_minutes(self.lunch_start) if self.lunch_start else None

    @property
    def _lunch_end_minutes(self) -> int | None:
        return time_to_minutes(self.lunch_end) if self.lunch_end else None

    @property
    def lunch(self) -> tuple[int, int] | None:
        if self.lunch_start is None:
            return None
        return self._lunch_start_minutes, self._lunch_end_minutes

    @property
    def max_slots_per_day(self) -> int:
        """Upper bound on candidates: (close - open) / step."""
        return (self.close_minutes - self.open_minutes) // self.step_minutes

    def is_open_on(self, day: date) -> bool:
        return weekday_key(day) in self.open_weekdays

    def for_date(self, day: date) -> DayHours:
        """Effective operating window for ``day`` (custom weekday hours win)."""
        override = self.weekday_overrides.get(weekday_key(day))
        if override is not None:
            return override
        return DayHours(
            open_minutes=self.open_minutes,
            close_minutes=self.close_minutes,
            step_minutes=self.step_minutes,
            lunch_start_minutes=self._lunch_start_minutes,
            lunch_end_minutes=self._lunch_end_minutes,
        )

    def is_within_business_hours(self, minutes: int, day: date | None = None) -> bool:
        """True if ``minutes`` falls inside [open, close) of the day."""
        hours = self.for_date(day) if day else self
        return hours.open_minutes <= minutes < hours.close_minutes

    def hour_rows(self) -> list[int]:
        """Hours labelled on the calendar grid, open..close inclusive."""
        return list(range(self.open_hour, self.close_hour + 1))

    def to_dict(self) -> dict:
        return {
            "open_hour": self.open_hour,
            "close_hour": self.close_hour,
            "step_minutes": self.step_minutes,
            "open_weekdays": [d for d in WEEKDAYS if d in self.open_weekdays],
            "lunch_start": self.lunch_start.strftime("%H:%M") if self.lunch_start else None,
            "lunch_end": self.lunch_end.strftime("%H:%M") if self.lunch_end else None,
            "weekday_overrides": {
                day: {
                    "open": minutes_to_time_str(h.open_minutes),
                    "close": minutes_to_time_str(h.close_minutes),
                    "lunch_start": (
                        minutes_to_time_str(h.lunch_start_minutes)
                        if h.lunch_start_minutes is not None else None
                    ),
                    "lunch_end": (
                        minutes_to_time_str(h.lunch_end_minutes)
                        if h.lunch_end_minutes is not None else None
                    ),
                }
                for day, h in self.weekday_overrides.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BusinessHoursConfig":
        step = data.get("step_minutes", 20)
        return cls(
            open_hour=data["open_hour"],
            close_hour=data["close_hour"],
            step_minutes=step,
            open_weekdays=frozenset(data.get("open_weekdays") or ()),
            lunch_start=parse_time_of_day(data.get("lunch_start")),
            lunch_end=parse_time_of_day(data.get("lunch_end")),
            weekday_overrides={
                day: day_hours_from_strings(
                    h["open"], h["close"], step, h.get("lunch_start"), h.get("lunch_end")
                )
                for day, h in (data.get("weekday_overrides") or {}).items()
            },
        )


def parse_time_of_day(value: str | None) -> time | None:
    """Parse "HH:MM[:SS]" into datetime.time (None for empty)."""
    normalized = normalize_time(value)
    if normalized is None:
        return None
    hour, minute = normalized.split(":")
    if hour == "24":
        raise SlotValidationError(f"Invalid time of day: {value!r}")
    return time(int(hour), int(minute))


def day_hours_from_strings(
    open_time: str,
    close_time: str,
    step_minutes: int,
    lunch_start: str | None = None,
    lunch_end: str | None = None,
) -> DayHours:
    lunch_start = normalize_time(lunch_start)
    lunch_end = normalize_time(lunch_end)
    return DayHours(
        open_minutes=time_str_to_minutes(open_time),
        close_minutes=time_str_to_minutes(close_time),
        step_minutes=step_minutes,
        lunch_start_minutes=time_str_to_minutes(lunch_start) if lunch_start else None,
        lunch_end_minutes=time_str_to_minutes(lunch_end) if lunch_end else None,
    )


DEFAULT_BUSINESS_HOURS = BusinessHoursConfig()
