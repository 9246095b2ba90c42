import pytest

from barberhub.services.slots.calculator import generate_candidates
from barberhub.services.slots.config import (
    BusinessHoursConfig,
    DayHours,
    SlotValidationError,
    time_str_to_minutes,
)


def test_no_candidate_runs_past_closing():
    cfg = BusinessHoursConfig(open_hour=8, close_hour=20, step_minutes=20)
    candidates = generate_candidates(cfg, 45)

    assert candidates[0] == time_str_to_minutes("08:00")
    assert candidates[-1] == time_str_to_minutes("19:00")
    # 19:20 + 45 = 20:05 runs past closing
    assert time_str_to_minutes("19:20") not in candidates
    assert time_str_to_minutes("19:40") not in candidates
    assert all(start + 45 <= 20 * 60 for start in candidates)


def test_service_ending_exactly_at_close_is_a_candidate():
    cfg = BusinessHoursConfig(open_hour=8, close_hour=20, step_minutes=20)
    assert generate_candidates(cfg, 20)[-1] == time_str_to_minutes("19:40")


def test_candidates_are_stepped_and_bounded():
    cfg = BusinessHoursConfig(open_hour=9, close_hour=12, step_minutes=25)
    candidates = generate_candidates(cfg, 5)

    assert candidates == list(range(540, 720, 25))
    assert len(candidates) <= (12 - 9) * 60 // 25 + 1


def test_service_longer_than_the_day_has_no_candidates():
    cfg = BusinessHoursConfig(open_hour=9, close_hour=10)
    assert generate_candidates(cfg, 90) == []


def test_day_hours_with_minutes():
    hours = DayHours(open_minutes=9 * 60 + 30, close_minutes=11 * 60, step_minutes=30)
    assert generate_candidates(hours, 30) == [570, 600, 630]


@pytest.mark.parametrize("duration", [0, -15])
def test_non_positive_duration_is_rejected(duration):
    with pytest.raises(SlotValidationError):
        generate_candidates(BusinessHoursConfig(), duration)
