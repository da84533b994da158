"""
Demerit Calculator Tests

Covers:
- Two-year inclusive window (start, end, leap day)
- Exclusion of events outside the window, including later-dated ones
- Age-dependent threshold and the strictly-greater trigger
"""

import pytest
from datetime import date

from road_registry.models import DemeritEvent
from road_registry.services.registry import (
    DemeritCalculator,
    points_in_window,
    suspension_threshold,
    window_start,
)


PERSON_ID = "34$%abXYZA"


def event(day: int, month: int, year: int, points: int) -> DemeritEvent:
    return DemeritEvent(person_id=PERSON_ID, offense_date=date(year, month, day), points=points)


# =============================================================================
# TEST: Window
# =============================================================================

class TestWindow:
    """[offense - 2 years, offense], both ends inclusive."""

    def test_window_start(self):
        assert window_start(date(2024, 12, 1)) == date(2022, 12, 1)

    def test_leap_day_clamps(self):
        assert window_start(date(2024, 2, 29)) == date(2022, 2, 28)

    def test_boundaries_inclusive(self):
        offense = date(2024, 6, 15)
        events = [event(15, 6, 2022, 2), event(15, 6, 2024, 3)]
        assert points_in_window(events, offense, new_points=1) == 6

    def test_one_event_outside_window_excluded(self):
        """Only the event older than two years is dropped."""
        offense = date(2023, 6, 15)
        events = [event(14, 6, 2021, 6), event(1, 1, 2022, 6)]
        assert points_in_window(events, offense, new_points=6) == 12

    def test_later_dated_events_excluded(self):
        offense = date(2023, 1, 1)
        events = [event(1, 1, 2024, 5)]
        assert points_in_window(events, offense, new_points=2) == 2

    def test_no_events(self):
        assert points_in_window([], date(2024, 1, 1), new_points=4) == 4

    def test_earliest_years_floor_at_date_min(self):
        assert window_start(date(1, 1, 1)) == date.min
        assert window_start(date(2, 6, 1)) == date.min
        assert window_start(date(3, 6, 1)) == date(1, 6, 1)
        assert points_in_window([event(1, 1, 1, 2)], date(2, 12, 31), new_points=1) == 3


# =============================================================================
# TEST: Threshold
# =============================================================================

class TestThreshold:
    """6 points under 21, 12 points from 21."""

    @pytest.mark.parametrize("age,expected", [(16, 6), (20, 6), (21, 12), (45, 12)])
    def test_threshold_by_age(self, age, expected):
        assert suspension_threshold(age) == expected


# =============================================================================
# TEST: Assessment
# =============================================================================

class TestDemeritCalculator:
    """Age at offense uses the offense year, not the full date."""

    @pytest.fixture
    def calculator(self):
        return DemeritCalculator()

    def test_young_driver_over_threshold(self, calculator):
        """Born 2005, offenses 4 + 3 + 2 within two years of 01-12-2024."""
        assessment = calculator.assess(
            birth_date=date(2005, 1, 1),
            offense_date=date(2024, 12, 1),
            new_points=2,
            existing_events=[event(1, 1, 2023, 4), event(1, 6, 2024, 3)],
        )
        assert assessment.age_at_offense == 19
        assert assessment.threshold == 6
        assert assessment.total_points == 9
        assert assessment.exceeds_threshold

    def test_exactly_at_threshold_does_not_trigger(self, calculator):
        assessment = calculator.assess(
            birth_date=date(1990, 1, 1),
            offense_date=date(2024, 1, 1),
            new_points=6,
            existing_events=[event(1, 6, 2023, 6)],
        )
        assert assessment.total_points == 12
        assert not assessment.exceeds_threshold

    def test_age_ignores_birthday_within_year(self, calculator):
        """Born 31-12-2003, offense 01-01-2024: counted as 21 already."""
        assessment = calculator.assess(
            birth_date=date(2003, 12, 31),
            offense_date=date(2024, 1, 1),
            new_points=6,
            existing_events=[event(1, 6, 2023, 1)],
        )
        assert assessment.age_at_offense == 21
        assert assessment.threshold == 12
        assert not assessment.exceeds_threshold

    def test_to_dict(self, calculator):
        assessment = calculator.assess(date(2000, 1, 1), date(2024, 1, 1), 3, [])
        assert assessment.to_dict() == {
            "age_at_offense": 24,
            "threshold": 12,
            "total_points": 3,
            "exceeds_threshold": False,
        }
