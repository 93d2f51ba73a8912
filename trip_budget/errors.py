"""Ledger exceptions."""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class CategoryError(LedgerError):
    """A category name is blank, duplicated or otherwise unusable."""
    pass


class CategoryInUseError(CategoryError):
    """The category is still referenced by expenses and cannot be removed."""
    pass


class UnsupportedOperationError(LedgerError):
    """The operation is not available in the configured budget mode."""
    pass


class ResetNotConfirmedError(LedgerError):
    """reset() was called without a pending confirmation."""
    pass
