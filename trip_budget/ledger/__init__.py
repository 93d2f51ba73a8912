"""Ledger store and aggregation."""

from trip_budget.ledger import aggregator
from trip_budget.ledger.store import LedgerStore

__all__ = ["LedgerStore", "aggregator"]
