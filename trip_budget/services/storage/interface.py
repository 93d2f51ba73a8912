"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for snapshot persistence.
This allows us to:
1. Keep the ledger independent of where the snapshot lives
2. Use in-memory storage for testing
3. Swap the local JSON file for another durable local store later

The interface is intentionally tiny: the whole ledger is one blob under one
fixed key, so load, save and clear are all we need.
"""

from abc import ABC, abstractmethod
from typing import Optional

from trip_budget.models.ledger import LedgerSnapshot


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.

    Any storage implementation must implement these methods.
    All calls are synchronous and blocking.
    """

    @abstractmethod
    def load(self) -> Optional[LedgerSnapshot]:
        """
        Load the last saved snapshot.

        Returns:
            The snapshot, or None if nothing is stored

        Raises:
            CorruptSnapshotError: If the stored value cannot be parsed
            StorageError: If the store cannot be read
        """
        pass

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """
        Overwrite the stored snapshot.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """
        Erase the stored snapshot entirely.

        After clear(), load() returns None. This is not the same
        as saving an empty snapshot.

        Raises:
            StorageError: If the store cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """Stored data exists but is not a valid ledger snapshot."""
    pass
