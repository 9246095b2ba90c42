# backend/barberhub/services/slots/overlap.py
"""
Interval overlap primitive.

Intervals are closed-open: [start, start + duration).
Touching endpoints do NOT overlap: a 09:00-09:30 booking and a
09:30 slot can coexist. Every overlap check in the engine goes
through overlaps(); do not compare bounds ad hoc elsewhere.
"""

from dataclasses import dataclass
from typing import Iterable, TypeVar


def overlaps(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    """Do [start_a, start_a + duration_a) and [start_b, start_b + duration_b) intersect?"""
    return start_a < start_b + duration_b and start_b < start_a + duration_a


@dataclass(frozen=True)
class Interval:
    start: int
    duration: int

    @property
    def end(self) -> int:
        return self.start + self.duration

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self.start, self.duration, other.start, other.duration)


T = TypeVar("T", bound=Interval)


def find_overlapping(interval: Interval, others: Iterable[T]) -> list[T]:
    """Members of ``others`` overlapping ``interval``, in input order."""
    return [other for other in others if interval.overlaps(other)]
