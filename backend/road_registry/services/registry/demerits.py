"""
Demerit Calculator

Rolling two-year point totals and the age-dependent suspension threshold.

Key behaviors:
- Age at offense is bare year subtraction (offense year - birth year)
- The window is [offense date - 2 years, offense date], both ends inclusive
- Existing events dated after the new offense are not counted
- Suspension triggers when the total is strictly greater than the threshold
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable

from dateutil.relativedelta import relativedelta

from ...models.domain import DemeritEvent


# =============================================================================
# THRESHOLD CONFIGURATION
# =============================================================================

WINDOW_YEARS = 2
YOUNG_DRIVER_AGE = 21       # Drivers under this age use the lower threshold
YOUNG_DRIVER_THRESHOLD = 6
STANDARD_THRESHOLD = 12


@dataclass
class SuspensionAssessment:
    """Outcome of evaluating one new offense against the log."""
    age_at_offense: int
    threshold: int
    total_points: int

    @property
    def exceeds_threshold(self) -> bool:
        return self.total_points > self.threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age_at_offense": self.age_at_offense,
            "threshold": self.threshold,
            "total_points": self.total_points,
            "exceeds_threshold": self.exceeds_threshold,
        }


def window_start(offense_date: date) -> date:
    """Offense date minus two calendar years (29 Feb clamps to 28 Feb, floors at date.min)."""
    try:
        return offense_date - relativedelta(years=WINDOW_YEARS)
    except ValueError:
        # year would drop below 1
        return date.min


def points_in_window(events: Iterable[DemeritEvent], offense_date: date, new_points: int = 0) -> int:
    """new_points plus every event inside the inclusive window ending at offense_date."""
    cutoff = window_start(offense_date)
    total = new_points
    for event in events:
        if cutoff <= event.offense_date <= offense_date:
            total += event.points
    return total


def suspension_threshold(age: int) -> int:
    return YOUNG_DRIVER_THRESHOLD if age < YOUNG_DRIVER_AGE else STANDARD_THRESHOLD


class DemeritCalculator:
    """Combines the window sum and the threshold into one assessment."""

    def assess(
        self,
        birth_date: date,
        offense_date: date,
        new_points: int,
        existing_events: Iterable[DemeritEvent],
    ) -> SuspensionAssessment:
        age = offense_date.year - birth_date.year
        return SuspensionAssessment(
            age_at_offense=age,
            threshold=suspension_threshold(age),
            total_points=points_in_window(existing_events, offense_date, new_points),
        )
