# backend/barberhub/services/slots/presenter.py
"""
Calendar grid presentation helpers.

Positions bookings on a time-proportional grid and flags overlapping
bookings for highlighting. Conflicts here are informational: an
administrator may double-book on purpose, so nothing is gated.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable

from .availability import BookedInterval


@dataclass(frozen=True)
class EventBox:
    top: float
    height: float


def position_event(
    start: int,
    duration: int,
    window_start: int,
    step_minutes: int,
    row_height: float,
    min_height: float,
) -> EventBox:
    """
    Vertical placement of an event on the grid.

    top    = (start - window_start) / step * row_height
    height = max(duration / step * row_height, min_height)
    """
    top = (start - window_start) / step_minutes * row_height
    height = max(duration / step_minutes * row_height, min_height)
    return EventBox(top=top, height=height)


def find_conflicts(
    bookings: Iterable[BookedInterval],
) -> list[tuple[BookedInterval, BookedInterval]]:
    """Pairs of bookings of the same professional that overlap, ordered by start."""
    by_resource: dict[int, list[BookedInterval]] = {}
    for booking in bookings:
        by_resource.setdefault(booking.resource_id, []).append(booking)

    conflicts = []
    for resource_id in sorted(by_resource, key=str):
        ordered = sorted(by_resource[resource_id], key=lambda b: (b.start, b.duration))
        for a, b in combinations(ordered, 2):
            if a.overlaps(b):
                conflicts.append((a, b))
    return conflicts


def conflicting_appointment_ids(bookings: Iterable[BookedInterval]) -> set[int]:
    """Appointment ids involved in at least one conflict."""
    ids: set[int] = set()
    for a, b in find_conflicts(bookings):
        ids.update(x.appointment_id for x in (a, b) if x.appointment_id is not None)
    return ids
