"""Workout log submission: parse, estimate, store in one batch."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fitlog.core.calories import estimate_workout_calories
from fitlog.core.models import ParsedWorkout, SubmissionResult, WorkoutEntry
from fitlog.core.parser import parse_workout_log
from fitlog.core.store import EntryStore

logger = logging.getLogger(__name__)


def build_entries(
    workouts: List[ParsedWorkout],
    owner_id: str,
    occurred_at: datetime,
) -> List[WorkoutEntry]:
    """Attach calories, owner and timestamp to parsed workouts."""
    entries: List[WorkoutEntry] = []
    for workout in workouts:
        calories = estimate_workout_calories(workout)
        logger.debug("%s / %s: %d kcal", workout.category, workout.name, calories)
        entries.append(
            WorkoutEntry(
                category=workout.category,
                name=workout.name,
                sets=workout.sets,
                reps=workout.reps,
                weight_kg=workout.weight_kg,
                duration_min=workout.duration_min,
                calories_burned=calories,
                owner_id=owner_id,
                occurred_at=occurred_at,
            )
        )
    return entries


def submit_workouts(
    store: EntryStore,
    raw: Optional[str],
    owner_id: str,
    now: Optional[datetime] = None,
) -> SubmissionResult:
    """Parse a workout log and persist every entry, or none of them.

    Parse errors propagate before the store is touched; the store receives a
    single ``insert_all`` call for the whole batch.
    """
    if not owner_id or not owner_id.strip():
        raise ValueError("Unauthorized: an owner id is required")

    workouts = parse_workout_log(raw)
    entries = build_entries(workouts, owner_id, now or datetime.now())
    store.insert_all(entries)

    logger.info("Stored %d workouts for %s", len(entries), owner_id)
    return SubmissionResult(workouts=workouts, entries=entries)
