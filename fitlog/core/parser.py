"""Workout log parser.

A log is a sequence of blocks separated by ``;``. Each block holds five
``#``-prefixed lines, in this order::

    #Legs
    #Back Squat
    #5sets10reps
    #60kg
    #15min

Blocks are validated one at a time and the first failure aborts the whole
parse, so a caller never sees a partial list.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from fitlog.core.constants import (
    BLOCK_FIELDS,
    BLOCK_LINES,
    BLOCK_SEPARATOR,
    DURATION_MARKER,
    LINE_PREFIX,
    LINE_SEPARATOR,
    REPS_MARKER,
    SETS_MARKER,
    STATUS_KINDS,
    WEIGHT_MARKER,
)
from fitlog.core.models import ParsedWorkout

_INT_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)$")


class WorkoutLogError(ValueError):
    """Base class for workout log parse failures."""

    status_kind = STATUS_KINDS["malformed_block"]


class EmptyInputError(WorkoutLogError):
    """Raised when a log contains no workout blocks at all."""

    status_kind = STATUS_KINDS["empty_input"]

    def __init__(self, message: str = "No valid workouts found in the workout string") -> None:
        super().__init__(message)


class MalformedBlockError(WorkoutLogError):
    """Raised when a block does not follow the five-line layout."""

    def __init__(self, ordinal: int, message: Optional[str] = None) -> None:
        self.ordinal = ordinal
        super().__init__(message or f"Workout string is missing details for {ordinal}th workout")


class InvalidNumericError(MalformedBlockError):
    """Raised when one numeric field of a block cannot be read."""

    status_kind = STATUS_KINDS["invalid_numeric"]

    def __init__(self, ordinal: int, field: str) -> None:
        self.field = field
        super().__init__(ordinal, f"Please enter proper format for {ordinal}th workout ({field})")


def _parse_int(text: str, ordinal: int, field: str) -> int:
    value = text.strip()
    if not _INT_RE.match(value):
        raise InvalidNumericError(ordinal, field)
    return int(value)


def _parse_decimal(text: str, ordinal: int, field: str) -> float:
    value = text.strip()
    if not _DECIMAL_RE.match(value):
        raise InvalidNumericError(ordinal, field)
    return float(value)


def _strip_marker(text: str, marker: str, ordinal: int, field: str) -> str:
    """Return the text before ``marker``; the marker must end the text."""
    head, found, tail = text.partition(marker)
    if not found or tail.strip():
        raise InvalidNumericError(ordinal, field)
    return head


def split_block_lines(segment: str, ordinal: int) -> Dict[str, str]:
    """Split a block into its named lines with the ``#`` prefix removed."""
    parts = [part.strip() for part in segment.split(LINE_SEPARATOR)]
    if len(parts) < BLOCK_LINES:
        raise MalformedBlockError(ordinal)

    lines: Dict[str, str] = {}
    for field, part in zip(BLOCK_FIELDS, parts):
        if not part.startswith(LINE_PREFIX):
            raise MalformedBlockError(ordinal)
        lines[field] = part[len(LINE_PREFIX):].strip()
    return lines


def parse_sets_reps(text: str, ordinal: int) -> Tuple[int, int]:
    """Parse ``<int>sets<int>reps`` into (sets, reps)."""
    sets_text, found, rest = text.partition(SETS_MARKER)
    if not found:
        raise InvalidNumericError(ordinal, "sets")
    sets = _parse_int(sets_text, ordinal, "sets")
    reps = _parse_int(_strip_marker(rest, REPS_MARKER, ordinal, "reps"), ordinal, "reps")

    if sets <= 0:
        raise InvalidNumericError(ordinal, "sets")
    if reps <= 0:
        raise InvalidNumericError(ordinal, "reps")
    return sets, reps


def parse_block(segment: str, ordinal: int) -> ParsedWorkout:
    """Validate a single trimmed, non-empty block."""
    if not segment.startswith(LINE_PREFIX):
        raise MalformedBlockError(ordinal)

    lines = split_block_lines(segment, ordinal)
    if not lines["category"] or not lines["name"]:
        raise MalformedBlockError(ordinal)

    sets, reps = parse_sets_reps(lines["sets_reps"], ordinal)
    weight = _parse_decimal(
        _strip_marker(lines["weight"], WEIGHT_MARKER, ordinal, "weight"), ordinal, "weight"
    )
    duration = _parse_decimal(
        _strip_marker(lines["duration"], DURATION_MARKER, ordinal, "duration"), ordinal, "duration"
    )

    return ParsedWorkout(
        category=lines["category"],
        name=lines["name"],
        sets=sets,
        reps=reps,
        weight_kg=weight,
        duration_min=duration,
    )


def parse_workout_log(raw: Optional[str]) -> List[ParsedWorkout]:
    """Parse a raw workout log into workouts, failing on the first bad block.

    Ordinals are 1-based and count every ``;`` segment, including empty ones,
    so error messages point at the position a user sees in the text.
    """
    text = (raw or "").strip()
    workouts: List[ParsedWorkout] = []

    for ordinal, segment in enumerate(text.split(BLOCK_SEPARATOR), 1):
        segment = segment.strip()
        if not segment:
            continue
        workouts.append(parse_block(segment, ordinal))

    if not workouts:
        raise EmptyInputError()
    return workouts
