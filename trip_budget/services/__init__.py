"""Services package."""

from trip_budget.services.storage import (
    CorruptSnapshotError,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    SnapshotStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "CorruptSnapshotError",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "SnapshotStorageInterface",
    "StorageError",
]
