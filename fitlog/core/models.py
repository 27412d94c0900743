"""Lightweight data models used across commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List


@dataclass(frozen=True)
class ParsedWorkout:
    """One validated block of a workout log, before calories are estimated."""

    category: str
    name: str
    sets: int
    reps: int
    weight_kg: float
    duration_min: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "workoutName": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight_kg,
            "duration": self.duration_min,
        }


@dataclass(frozen=True)
class WorkoutEntry:
    """A stored workout entry."""

    category: str
    name: str
    sets: int
    reps: int
    weight_kg: float
    duration_min: float
    calories_burned: int
    owner_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "workoutName": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight_kg,
            "duration": self.duration_min,
            "caloriesBurned": self.calories_burned,
            "user": self.owner_id,
            "date": self.occurred_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "WorkoutEntry":
        return cls(
            category=str(payload["category"]),
            name=str(payload["workoutName"]),
            sets=int(payload["sets"]),
            reps=int(payload["reps"]),
            weight_kg=float(payload["weight"]),
            duration_min=float(payload["duration"]),
            calories_burned=int(payload["caloriesBurned"]),
            owner_id=str(payload["user"]),
            occurred_at=datetime.fromisoformat(payload["date"]),
        )


@dataclass(frozen=True)
class DailyBucket:
    """Calories for one calendar day."""

    day: date
    total_calories: int = 0

    @property
    def label(self) -> str:
        return str(self.day.day)


@dataclass(frozen=True)
class CategoryBucket:
    """Calories for one workout category."""

    id: int
    category: str
    total_calories: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.total_calories, "label": self.category}


@dataclass(frozen=True)
class DayListing:
    """Entries recorded on a single day."""

    day: date
    entries: List[WorkoutEntry] = field(default_factory=list)
    total_calories: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "todaysWorkouts": [entry.to_dict() for entry in self.entries],
            "totalCaloriesBurnt": self.total_calories,
        }


@dataclass(frozen=True)
class DashboardResult:
    """Today's totals plus the trailing seven-day series."""

    total_calories_today: int
    total_workouts_today: int
    avg_calories_per_workout: float
    category_breakdown: List[CategoryBucket]
    weekly_series: List[DailyBucket]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCaloriesBurnt": self.total_calories_today,
            "totalWorkouts": self.total_workouts_today,
            "avgCaloriesBurntPerWorkout": self.avg_calories_per_workout,
            "totalWeeksCaloriesBurnt": {
                "weeks": [bucket.label for bucket in self.weekly_series],
                "caloriesBurned": [bucket.total_calories for bucket in self.weekly_series],
            },
            "pieChartData": [bucket.to_dict() for bucket in self.category_breakdown],
        }


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a successful workout log submission."""

    workouts: List[ParsedWorkout]
    entries: List[WorkoutEntry]
    message: str = "Workouts added successfully"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "workouts": [workout.to_dict() for workout in self.workouts],
        }
