"""
Local JSON File Storage

DESIGN DECISION: A single JSON file acts as the local key-value store.
The file holds an object mapping keys to snapshot blobs, so several
ledgers (or unrelated data) can share one file without clobbering each
other. The ledger only ever touches its own fixed key.

TRADEOFFS:
- The whole file is rewritten on every save (fine for one trip's data)
- No locking; a single writer is assumed
"""

import json
from pathlib import Path
from typing import Optional, Union

from trip_budget.models.ledger import BudgetMode, LedgerSnapshot
from trip_budget.services.storage.interface import (
    CorruptSnapshotError,
    SnapshotStorageInterface,
    StorageError,
)


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Stores the ledger snapshot under one key of a JSON file.

    The snapshot is written in the blob layout of the configured
    budget mode (see LedgerSnapshot.to_blob).
    """

    def __init__(
        self,
        path: Union[str, Path],
        key: str,
        budget_mode: BudgetMode = BudgetMode.PER_CATEGORY,
    ):
        self._path = Path(path)
        self._key = key
        self._mode = BudgetMode(budget_mode)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> str:
        return self._key

    def _read_all(self) -> dict:
        """Read the whole key-value file. Missing file means empty store."""
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptSnapshotError(f"{self._path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptSnapshotError(f"{self._path} does not hold a JSON object")
        return data

    def _read_all_or_empty(self) -> dict:
        # A corrupt file is replaced rather than blocking writes forever
        try:
            return self._read_all()
        except CorruptSnapshotError:
            return {}

    def _write_all(self, data: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e

    def load(self) -> Optional[LedgerSnapshot]:
        blob = self._read_all().get(self._key)
        if blob is None:
            return None
        try:
            return LedgerSnapshot.from_blob(blob)
        except ValueError as e:
            raise CorruptSnapshotError(f"Stored snapshot under {self._key!r} is invalid: {e}") from e

    def save(self, snapshot: LedgerSnapshot) -> None:
        data = self._read_all_or_empty()
        data[self._key] = snapshot.to_blob(self._mode)
        self._write_all(data)

    def clear(self) -> None:
        data = self._read_all_or_empty()
        data.pop(self._key, None)
        if data:
            self._write_all(data)
            return
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {self._path}: {e}") from e
