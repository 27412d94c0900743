"""Helpers for reading workout log input."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml

LOG_KEY = "workoutString"


def _extract_log(raw_data: Any) -> str:
    if isinstance(raw_data, str):
        return raw_data
    if isinstance(raw_data, dict):
        value = raw_data.get(LOG_KEY)
        if isinstance(value, str):
            return value
        raise ValueError(f"Missing '{LOG_KEY}' string in workout input")
    raise ValueError("Workout input must be text or an object with a 'workoutString' key")


def load_log_input(
    text: Optional[str] = None,
    file_path: Optional[Path] = None,
    read_stdin: bool = False,
    stdin_text: str = "",
) -> str:
    """Load a raw workout log from an argument, a file or stdin text.

    ``.json``, ``.yaml`` and ``.yml`` files carry the log under a
    ``workoutString`` key; any other file is read as plain log text.
    """
    if text is not None:
        return text

    if file_path:
        content = file_path.read_text()
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            return _extract_log(json.loads(content))
        if suffix in {".yaml", ".yml"}:
            try:
                loaded = yaml.safe_load(content)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {file_path}: {exc}") from exc
            return _extract_log(loaded)
        return content

    if read_stdin:
        stripped = stdin_text.strip()
        if stripped.startswith("{"):
            try:
                return _extract_log(json.loads(stripped))
            except json.JSONDecodeError:
                return stdin_text
        return stdin_text

    return ""
