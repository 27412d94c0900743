from __future__ import annotations

import pytest

from fitlog.core.calories import estimate_calories, estimate_workout_calories
from fitlog.core.models import ParsedWorkout


def test_estimate_truncates_instead_of_rounding() -> None:
    assert estimate_calories(72.9, 30.7) == 30 * 5 * 72 == 10800


@pytest.mark.parametrize(
    ("weight", "duration", "expected"),
    [
        (0, 10, 0),
        (10, 0, 0),
        (60, 15, 4500),
        (0.9, 100, 0),
        (100, 0.99, 0),
    ],
)
def test_estimate_calories(weight: float, duration: float, expected: int) -> None:
    assert estimate_calories(weight, duration) == expected


def test_estimate_negative_inputs_propagate() -> None:
    assert estimate_calories(-10, 5) == -250
    assert estimate_calories(-10.9, 5) == -250
    assert estimate_calories(-2, -3) == 30


def test_estimate_workout_calories() -> None:
    workout = ParsedWorkout("Legs", "Squat", 3, 10, 72.9, 30.7)
    assert estimate_workout_calories(workout) == 10800
    assert isinstance(estimate_workout_calories(workout), int)
