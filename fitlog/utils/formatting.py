"""Formatting helpers used by console output."""

from __future__ import annotations

from typing import List, Optional


def format_number(value: Optional[float]) -> str:
    """Format a number without a trailing ``.0`` for whole values."""
    if value is None:
        return "N/A"
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def format_weight(kg: Optional[float]) -> str:
    if kg is None:
        return "N/A"
    return f"{format_number(kg)} kg"


def format_minutes(minutes: Optional[float]) -> str:
    if minutes is None:
        return "N/A"
    return f"{format_number(minutes)} min"


def format_calories(calories: Optional[float]) -> str:
    if calories is None:
        return "N/A"
    return f"{format_number(round(float(calories), 1))} kcal"


def calorie_bars(values: List[int], width: int = 30, char: str = "#") -> List[str]:
    """Scale values to text bars, longest bar = ``width`` characters."""
    peak = max([value for value in values if value > 0], default=0)
    if peak == 0:
        return ["" for _ in values]
    return [char * int(round(width * max(value, 0) / peak)) for value in values]
