"""
In-Memory Storage

Keeps the snapshot as JSON text in memory. Used for tests and for
sessions that should not touch the disk. Goes through the same blob
encoding as the file backend so round-trip behaviour is identical.
"""

import json
from typing import Optional

from trip_budget.models.ledger import BudgetMode, LedgerSnapshot
from trip_budget.services.storage.interface import (
    CorruptSnapshotError,
    SnapshotStorageInterface,
)


class InMemorySnapshotStorage(SnapshotStorageInterface):
    """Snapshot storage backed by a single in-memory string."""

    def __init__(self, budget_mode: BudgetMode = BudgetMode.PER_CATEGORY):
        self._mode = BudgetMode(budget_mode)
        self._raw: Optional[str] = None
        self.save_count = 0

    @property
    def raw(self) -> Optional[str]:
        """The stored JSON text, or None if nothing is stored."""
        return self._raw

    def put_raw(self, raw: Optional[str]) -> None:
        """Store arbitrary text as-is (e.g. to simulate corrupt data)."""
        self._raw = raw

    def load(self) -> Optional[LedgerSnapshot]:
        if self._raw is None:
            return None
        try:
            blob = json.loads(self._raw)
        except json.JSONDecodeError as e:
            raise CorruptSnapshotError(f"Stored snapshot is not valid JSON: {e}") from e
        if blob is None:
            return None
        try:
            return LedgerSnapshot.from_blob(blob)
        except ValueError as e:
            raise CorruptSnapshotError(f"Stored snapshot is invalid: {e}") from e

    def save(self, snapshot: LedgerSnapshot) -> None:
        self._raw = json.dumps(snapshot.to_blob(self._mode))
        self.save_count += 1

    def clear(self) -> None:
        self._raw = None
