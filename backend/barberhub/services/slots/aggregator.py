# backend/barberhub/services/slots/aggregator.py
"""
Multi-service aggregation.

A customer may pick several services for one visit; the slot must fit
their combined duration contiguously, so aggregation runs before slot
generation and any change of selection invalidates computed slots.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .availability import Slot
from .config import SlotValidationError, StaleSlotsError


@dataclass(frozen=True)
class ServiceRequest:
    duration_minutes: int
    price: Decimal = Decimal("0")
    service_id: int | None = None

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise SlotValidationError(
                f"service duration must be positive, got {self.duration_minutes}"
            )
        if Decimal(self.price) < 0:
            raise SlotValidationError(f"service price must be >= 0, got {self.price}")


@dataclass(frozen=True)
class ServiceSelection:
    total_duration: int
    total_price: Decimal
    service_ids: tuple[int, ...] = ()


def aggregate_services(services: Iterable[ServiceRequest]) -> ServiceSelection:
    """Sum durations and prices of the selected services."""
    services = list(services)
    if not services:
        raise SlotValidationError("at least one service must be selected")

    return ServiceSelection(
        total_duration=sum(s.duration_minutes for s in services),
        total_price=sum((Decimal(s.price) for s in services), Decimal("0")),
        service_ids=tuple(s.service_id for s in services if s.service_id is not None),
    )


def service_requests_from_rows(rows: Iterable) -> list[ServiceRequest]:
    """Build requests from Services rows (duration_min, price)."""
    return [
        ServiceRequest(
            duration_minutes=row.duration_min,
            price=Decimal(str(row.price or 0)),
            service_id=row.id,
        )
        for row in rows
    ]


@dataclass(frozen=True)
class SlotList:
    """Slots computed for one specific service selection."""
    selection: ServiceSelection
    slots: tuple[Slot, ...]
    resource_id: int | None = None

    @property
    def total_duration(self) -> int:
        return self.selection.total_duration

    def ensure_fresh(self, selection: ServiceSelection) -> "SlotList":
        """Raise StaleSlotsError if the selection's duration differs."""
        if selection.total_duration != self.total_duration:
            raise StaleSlotsError(
                f"slots were computed for {self.total_duration} min, "
                f"selection now needs {selection.total_duration} min; regenerate"
            )
        return self

    @property
    def available(self) -> list[Slot]:
        return [s for s in self.slots if s.available]

    def available_times(self) -> list[str]:
        """Start times of offerable slots, for the booking-creation flow."""
        return [s.time for s in self.slots if s.available]
