from __future__ import annotations

import json
import os
import threading
import time
from datetime import datetime
from pathlib import Path

import pytest

from fitlog.core.pipeline import submit_workouts
from fitlog.core.store import JsonEntryStore, StoreUnavailableError

DAY_START = datetime(2026, 2, 14)
DAY_END = datetime(2026, 2, 15)


def test_missing_file_is_empty_store(tmp_path: Path) -> None:
    store = JsonEntryStore(tmp_path / "nope.json")
    assert store.owners() == []
    assert store.owner_exists("alice") is False
    assert store.find_by_owner_and_range("alice", DAY_START, DAY_END) == []


def test_add_owner_is_idempotent(tmp_path: Path) -> None:
    store = JsonEntryStore(tmp_path / "store.json")
    assert store.add_owner("alice") is True
    assert store.add_owner("alice") is False
    assert store.owners() == ["alice"]
    assert json.loads((tmp_path / "store.json").read_text())["version"] == 1


def test_insert_all_and_range_queries(json_store: JsonEntryStore, entry_factory) -> None:
    json_store.insert_all(
        [
            entry_factory(datetime(2026, 2, 14, 18, 0), 200, category="Chest"),
            entry_factory(datetime(2026, 2, 14, 7, 0), 300, category="Legs"),
            entry_factory(datetime(2026, 2, 14, 9, 0), 100, category="Chest"),
            entry_factory(datetime(2026, 2, 15, 0, 0), 999),
            entry_factory(datetime(2026, 2, 14, 12, 0), 50, owner_id="bob"),
        ]
    )

    rows = json_store.find_by_owner_and_range("alice", DAY_START, DAY_END)
    assert [row.calories_burned for row in rows] == [300, 100, 200]
    assert json_store.count_by_owner_and_range("alice", DAY_START, DAY_END) == 3
    assert json_store.sum_calories_by_owner_and_range("alice", DAY_START, DAY_END) == 600
    assert list(json_store.sum_calories_grouped_by_category("alice", DAY_START, DAY_END).items()) == [
        ("Legs", 300),
        ("Chest", 300),
    ]


def test_entries_round_trip_through_file(json_store: JsonEntryStore, entry_factory) -> None:
    entry = entry_factory(datetime(2026, 2, 14, 7, 15, 30), 450, category="Back", name="Row")
    json_store.insert_all([entry])

    reopened = JsonEntryStore(json_store.path)
    assert reopened.find_by_owner_and_range("alice", DAY_START, DAY_END) == [entry]


def test_insert_all_empty_batch_does_not_write(tmp_path: Path) -> None:
    store = JsonEntryStore(tmp_path / "store.json")
    store.insert_all([])
    assert not store.path.exists()


def test_failed_replace_keeps_previous_file(
    monkeypatch: pytest.MonkeyPatch, json_store: JsonEntryStore, entry_factory
) -> None:
    before = json_store.path.read_text()

    def broken_replace(src, dst):
        raise OSError("read-only file system")

    monkeypatch.setattr("fitlog.core.store.os.replace", broken_replace)
    with pytest.raises(StoreUnavailableError, match="read-only"):
        json_store.insert_all([entry_factory(datetime(2026, 2, 14, 7, 0), 300)])

    assert json_store.path.read_text() == before
    expected = {json_store.path.name, json_store.lock_path.name}
    leftovers = [p.name for p in json_store.path.parent.iterdir() if p.name not in expected]
    assert leftovers == []


def test_corrupt_json_raises_store_unavailable(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{broken")
    with pytest.raises(StoreUnavailableError, match="Invalid JSON"):
        JsonEntryStore(path).owner_exists("alice")


def test_non_object_root_raises(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("[]")
    with pytest.raises(StoreUnavailableError, match="object at the root"):
        JsonEntryStore(path).owners()


def test_corrupt_record_raises(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"owners": ["alice"], "workouts": [{"category": "Legs"}]}))
    with pytest.raises(StoreUnavailableError, match="Corrupt workout record"):
        JsonEntryStore(path).find_by_owner_and_range("alice", DAY_START, DAY_END)


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits not enforced")
def test_unreadable_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{}")
    path.chmod(0)
    try:
        with pytest.raises(StoreUnavailableError, match="Failed to read"):
            JsonEntryStore(path).owners()
    finally:
        path.chmod(0o600)


def test_concurrent_submissions_keep_every_batch(
    monkeypatch: pytest.MonkeyPatch, json_store: JsonEntryStore, squat_block: str
) -> None:
    original_load = JsonEntryStore._load

    def slow_load(self):
        document = original_load(self)
        time.sleep(0.05)
        return document

    monkeypatch.setattr(JsonEntryStore, "_load", slow_load)
    errors = []

    def submit() -> None:
        try:
            submit_workouts(JsonEntryStore(json_store.path), squat_block, "alice", now=datetime(2026, 2, 14, 9, 0))
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert json_store.count_by_owner_and_range("alice", DAY_START, DAY_END) == 2


def test_add_owner_concurrent_registrations(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    original_load = JsonEntryStore._load

    def slow_load(self):
        document = original_load(self)
        time.sleep(0.05)
        return document

    monkeypatch.setattr(JsonEntryStore, "_load", slow_load)
    threads = [
        threading.Thread(target=JsonEntryStore(path).add_owner, args=(owner,)) for owner in ("alice", "bob")
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(JsonEntryStore(path).owners()) == ["alice", "bob"]
