"""
Application Wiring

Builds the ledger components from settings: storage backend, audit logger
and the ledger store that ties them together.

DESIGN DECISION: The presentation layer never constructs components itself.
It asks for a ready store here, so the same wiring is used by the UI and
by anything else that drives the ledger.
"""

from typing import Optional

from trip_budget.audit import AuditLogger
from trip_budget.config import LedgerSettings, get_settings
from trip_budget.ledger import LedgerStore
from trip_budget.services.storage import (
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    SnapshotStorageInterface,
)


def create_storage(
    settings: LedgerSettings,
    use_storage: bool = True,
) -> SnapshotStorageInterface:
    """
    Create the snapshot storage backend.

    Args:
        settings: Ledger settings (path, key, budget mode)
        use_storage: False keeps the snapshot in memory only
    """
    if not use_storage:
        return InMemorySnapshotStorage(budget_mode=settings.budget_mode)
    return JsonFileSnapshotStorage(
        path=settings.storage_path,
        key=settings.storage_key,
        budget_mode=settings.budget_mode,
    )


def create_app_components(
    use_storage: bool = True,
    settings: Optional[LedgerSettings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[LedgerStore, SnapshotStorageInterface, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the local JSON file.
                    Set to False for sessions without persistence.
        settings: Ledger settings; loaded from the environment if None.
        audit_logger: Logger to share; a new one is created if None.

    Returns:
        (ledger_store, storage, audit_logger)
    """
    settings = settings or get_settings().ledger
    audit_logger = audit_logger or AuditLogger()
    storage = create_storage(settings, use_storage=use_storage)

    store = LedgerStore(
        storage=storage,
        settings=settings,
        audit_logger=audit_logger,
    )
    return store, storage, audit_logger
