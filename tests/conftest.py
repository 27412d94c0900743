from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Sequence

import pytest
from typer.testing import CliRunner

from fitlog.core.models import WorkoutEntry
from fitlog.core.store import JsonEntryStore


class MemoryStore:
    """In-memory entry store that records the calls made against it."""

    def __init__(self, owners: Sequence[str] = ("alice",), entries: Sequence[WorkoutEntry] = ()) -> None:
        self.owners = set(owners)
        self.entries: List[WorkoutEntry] = list(entries)
        self.insert_calls: List[List[WorkoutEntry]] = []
        self.range_calls: List[tuple] = []

    def _select(self, owner_id: str, start: datetime, end: datetime) -> List[WorkoutEntry]:
        self.range_calls.append((owner_id, start, end))
        return [e for e in self.entries if e.owner_id == owner_id and start <= e.occurred_at < end]

    def owner_exists(self, owner_id: str) -> bool:
        return owner_id in self.owners

    def insert_all(self, entries: Sequence[WorkoutEntry]) -> None:
        self.insert_calls.append(list(entries))
        self.entries.extend(entries)

    def find_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> List[WorkoutEntry]:
        return self._select(owner_id, start, end)

    def count_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> int:
        return len(self._select(owner_id, start, end))

    def sum_calories_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> int:
        return sum(e.calories_burned for e in self._select(owner_id, start, end))

    def sum_calories_grouped_by_category(self, owner_id: str, start: datetime, end: datetime) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for entry in self._select(owner_id, start, end):
            totals[entry.category] = totals.get(entry.category, 0) + entry.calories_burned
        return totals


def make_entry(
    occurred_at: datetime,
    calories: int,
    category: str = "Legs",
    name: str = "Squat",
    owner_id: str = "alice",
) -> WorkoutEntry:
    return WorkoutEntry(
        category=category,
        name=name,
        sets=3,
        reps=10,
        weight_kg=50.0,
        duration_min=10.0,
        calories_burned=calories,
        owner_id=owner_id,
        occurred_at=occurred_at,
    )


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def squat_block() -> str:
    return "#Legs\n#Back Squat\n#5sets10reps\n#60kg\n#15min"


@pytest.fixture()
def sample_log(squat_block: str) -> str:
    return ";\n".join(
        [
            squat_block,
            "#Chest\n#Bench Press\n#4sets8reps\n#72.9kg\n#30.7min",
            "#Back\n#Deadlift\n#3sets5reps\n#100kg\n#10min",
        ]
    )


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def json_store(tmp_path: Path) -> JsonEntryStore:
    store = JsonEntryStore(tmp_path / "data" / "workouts.json")
    store.add_owner("alice")
    return store


@pytest.fixture()
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config, data and store at tmp_path and clear owner overrides."""
    monkeypatch.setenv("FITLOG_CONFIG_FILE", str(tmp_path / "config.toml"))
    monkeypatch.setenv("FITLOG_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("FITLOG_STORE", str(tmp_path / "data" / "workouts.json"))
    monkeypatch.delenv("FITLOG_OWNER", raising=False)
    return tmp_path


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write


@pytest.fixture()
def entry_factory():
    return make_entry
