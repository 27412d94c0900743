"""Day listings and dashboard statistics over stored entries."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from fitlog.core.constants import WEEKLY_SERIES_DAYS
from fitlog.core.models import CategoryBucket, DailyBucket, DashboardResult, DayListing
from fitlog.core.store import EntryStore, OwnerNotFoundError

logger = logging.getLogger(__name__)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return local [midnight, next midnight) for a calendar day."""
    start = datetime(day.year, day.month, day.day)
    next_day = day + timedelta(days=1)
    return start, datetime(next_day.year, next_day.month, next_day.day)


def trailing_days(today: date, days: int = WEEKLY_SERIES_DAYS) -> List[date]:
    """Return ``days`` calendar days ending at ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def _require_owner(store: EntryStore, owner_id: str) -> None:
    if not store.owner_exists(owner_id):
        raise OwnerNotFoundError(owner_id)


def list_day(store: EntryStore, owner_id: str, day: Optional[date] = None) -> DayListing:
    """List one owner's entries for a day (today by default)."""
    _require_owner(store, owner_id)
    target = day or date.today()
    start, end = day_bounds(target)

    entries = store.find_by_owner_and_range(owner_id, start, end)
    total = sum(entry.calories_burned for entry in entries)
    return DayListing(day=target, entries=entries, total_calories=total)


def category_breakdown(store: EntryStore, owner_id: str, start: datetime, end: datetime) -> List[CategoryBucket]:
    grouped = store.sum_calories_grouped_by_category(owner_id, start, end)
    return [
        CategoryBucket(id=index, category=category, total_calories=int(total))
        for index, (category, total) in enumerate(grouped.items())
    ]


def weekly_series(store: EntryStore, owner_id: str, today: date) -> List[DailyBucket]:
    buckets: List[DailyBucket] = []
    for day in trailing_days(today):
        start, end = day_bounds(day)
        total = store.sum_calories_by_owner_and_range(owner_id, start, end)
        buckets.append(DailyBucket(day=day, total_calories=int(total or 0)))
    return buckets


def dashboard(store: EntryStore, owner_id: str, today: Optional[date] = None) -> DashboardResult:
    """Build today's totals, category split and the trailing 7-day series."""
    _require_owner(store, owner_id)
    current = today or date.today()
    start, end = day_bounds(current)

    total_calories = int(store.sum_calories_by_owner_and_range(owner_id, start, end) or 0)
    total_workouts = store.count_by_owner_and_range(owner_id, start, end)
    average = total_calories / total_workouts if total_workouts > 0 else 0.0

    result = DashboardResult(
        total_calories_today=total_calories,
        total_workouts_today=total_workouts,
        avg_calories_per_workout=average,
        category_breakdown=category_breakdown(store, owner_id, start, end),
        weekly_series=weekly_series(store, owner_id, current),
    )
    logger.debug(
        "Dashboard for %s on %s: %d workouts, %d kcal",
        owner_id,
        current.isoformat(),
        total_workouts,
        total_calories,
    )
    return result
