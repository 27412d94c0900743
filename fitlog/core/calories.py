"""Calorie estimation for parsed workouts."""

from __future__ import annotations

from fitlog.core.constants import CALORIES_PER_MINUTE_PER_KG
from fitlog.core.models import ParsedWorkout


def estimate_calories(weight_kg: float, duration_min: float) -> int:
    """Estimate calories burned.

    Both inputs are truncated toward zero before multiplying, so 72.9 kg
    counts as 72. Negative inputs are not clamped.
    """
    return int(duration_min) * CALORIES_PER_MINUTE_PER_KG * int(weight_kg)


def estimate_workout_calories(workout: ParsedWorkout) -> int:
    return estimate_calories(workout.weight_kg, workout.duration_min)
