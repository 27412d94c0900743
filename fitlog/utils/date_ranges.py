"""Date option parsing helpers."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

import typer

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date(value: Optional[str]) -> Optional[str]:
    """Typer callback that validates YYYY-MM-DD format for date options."""
    if value is None:
        return value
    if not _DATE_RE.match(value):
        raise typer.BadParameter(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2026-01-15)"
        )
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise typer.BadParameter(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2026-01-15)"
        )
    return value


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD date string."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    return parse_date(value) if value else None
