"""
Storage Services Package

Provides the abstract snapshot storage interface and concrete implementations.
The local JSON file is the default backend; the in-memory backend is used in
tests and for throwaway sessions.
"""

from trip_budget.services.storage.interface import (
    CorruptSnapshotError,
    SnapshotStorageInterface,
    StorageError,
)
from trip_budget.services.storage.json_file import JsonFileSnapshotStorage
from trip_budget.services.storage.memory import InMemorySnapshotStorage

__all__ = [
    # Interface
    "SnapshotStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "StorageError",
    # Implementations
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
]
