"""Workout entry storage: the query contract and a JSON file adapter."""

from __future__ import annotations

import contextlib
import fcntl
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Protocol, Sequence

from fitlog.core.constants import STATUS_KINDS, STORE_FORMAT_VERSION
from fitlog.core.models import WorkoutEntry

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Base class for entry store failures."""

    status_kind = STATUS_KINDS["store_unavailable"]


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be read or written."""


class OwnerNotFoundError(StoreError):
    """Raised when an owner id is unknown to the store."""

    status_kind = STATUS_KINDS["not_found"]

    def __init__(self, owner_id: str) -> None:
        self.owner_id = owner_id
        super().__init__("User not found")


class EntryStore(Protocol):
    """Queries the stats and submission code needs from a store.

    Ranges are half-open: ``start <= occurred_at < end``.
    """

    def owner_exists(self, owner_id: str) -> bool: ...

    def insert_all(self, entries: Sequence[WorkoutEntry]) -> None: ...

    def find_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> List[WorkoutEntry]: ...

    def count_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> int: ...

    def sum_calories_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> int: ...

    def sum_calories_grouped_by_category(
        self, owner_id: str, start: datetime, end: datetime
    ) -> Dict[str, int]: ...


def _in_range(entry: WorkoutEntry, owner_id: str, start: datetime, end: datetime) -> bool:
    return entry.owner_id == owner_id and start <= entry.occurred_at < end


class JsonEntryStore:
    """Entry store backed by a single JSON document on disk.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so a batch insert lands completely or not at all.
    Read-modify-write cycles hold an exclusive ``flock`` on a sidecar
    ``.lock`` file, so concurrent runs queue instead of overwriting each other.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(self.lock_path, "a")
        except OSError as exc:
            raise StoreUnavailableError(f"Failed to lock store file {self.path}: {exc}") from exc
        with handle:
            fcntl.flock(handle, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle, fcntl.LOCK_UN)

    def _empty(self) -> Dict[str, Any]:
        return {"version": STORE_FORMAT_VERSION, "owners": [], "workouts": []}

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return self._empty()
        try:
            loaded = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreUnavailableError(f"Invalid JSON in store file {self.path}: {exc}") from exc
        except OSError as exc:
            raise StoreUnavailableError(f"Failed to read store file {self.path}: {exc}") from exc

        if not isinstance(loaded, dict):
            raise StoreUnavailableError(f"Store file {self.path} must contain an object at the root")
        loaded.setdefault("owners", [])
        loaded.setdefault("workouts", [])
        return loaded

    def _save(self, document: Dict[str, Any]) -> None:
        text = json.dumps(document, indent=2) + "\n"
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=".fitlog-", suffix=".json", dir=str(self.path.parent))
            tmp_path = Path(temp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise StoreUnavailableError(f"Failed to write store file {self.path}: {exc}") from exc
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    def _entries(self) -> Iterable[WorkoutEntry]:
        for row in self._load()["workouts"]:
            try:
                yield WorkoutEntry.from_dict(row)
            except (KeyError, TypeError, ValueError) as exc:
                raise StoreUnavailableError(f"Corrupt workout record in {self.path}: {exc}") from exc

    def owners(self) -> List[str]:
        return [str(owner) for owner in self._load()["owners"]]

    def owner_exists(self, owner_id: str) -> bool:
        return owner_id in self.owners()

    def add_owner(self, owner_id: str) -> bool:
        """Register an owner. Returns False if it was already known."""
        with self._locked():
            document = self._load()
            if owner_id in document["owners"]:
                return False
            document["owners"].append(owner_id)
            self._save(document)
        logger.info("Registered owner %s in %s", owner_id, self.path)
        return True

    def insert_all(self, entries: Sequence[WorkoutEntry]) -> None:
        if not entries:
            return
        rows = [entry.to_dict() for entry in entries]
        with self._locked():
            document = self._load()
            document["workouts"] = list(document["workouts"]) + rows
            self._save(document)
        logger.debug("Inserted %d workouts into %s", len(rows), self.path)

    def find_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> List[WorkoutEntry]:
        rows = [entry for entry in self._entries() if _in_range(entry, owner_id, start, end)]
        rows.sort(key=lambda entry: entry.occurred_at)
        return rows

    def count_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> int:
        return len(self.find_by_owner_and_range(owner_id, start, end))

    def sum_calories_by_owner_and_range(self, owner_id: str, start: datetime, end: datetime) -> int:
        return sum(entry.calories_burned for entry in self.find_by_owner_and_range(owner_id, start, end))

    def sum_calories_grouped_by_category(
        self, owner_id: str, start: datetime, end: datetime
    ) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for entry in self.find_by_owner_and_range(owner_id, start, end):
            totals[entry.category] = totals.get(entry.category, 0) + entry.calories_burned
        return totals
