# backend/barberhub/services/slots/calculator.py
"""
Slot candidate generation.

Candidates are start times (minutes-of-day) from opening time, stepped
by step_minutes, strictly before closing time. A start whose service
would run past closing is never a candidate at all; it is not merely
marked unavailable.
"""

from .config import BusinessHoursConfig, DayHours, SlotValidationError


def generate_candidates(
    hours: BusinessHoursConfig | DayHours,
    total_duration: int,
) -> list[int]:
    """
    Enumerate candidate slot starts for a service of ``total_duration`` minutes.

    Returns:
        Ascending list of minutes-of-day. Length is bounded by
        (close - open) / step.
    """
    if total_duration <= 0:
        raise SlotValidationError(f"total_duration must be positive, got {total_duration}")

    candidates: list[int] = []
    t = hours.open_minutes
    while t < hours.close_minutes:
        if t + total_duration <= hours.close_minutes:
            candidates.append(t)
        t += hours.step_minutes

    return candidates
