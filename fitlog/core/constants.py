"""Static constants for fitlog."""

from __future__ import annotations

# Rough kilocalories per minute per kilogram of load. Not a physiological model.
CALORIES_PER_MINUTE_PER_KG = 5

BLOCK_SEPARATOR = ";"
LINE_SEPARATOR = "\n"
LINE_PREFIX = "#"

BLOCK_LINES = 5
BLOCK_FIELDS = ("category", "name", "sets_reps", "weight", "duration")

SETS_MARKER = "sets"
REPS_MARKER = "reps"
WEIGHT_MARKER = "kg"
DURATION_MARKER = "min"

WEEKLY_SERIES_DAYS = 7

STORE_FORMAT_VERSION = 1

STATUS_KINDS = {
    "empty_input": "EmptyInput",
    "malformed_block": "MalformedBlock",
    "invalid_numeric": "InvalidNumeric",
    "not_found": "NotFound",
    "store_unavailable": "StoreUnavailable",
}
