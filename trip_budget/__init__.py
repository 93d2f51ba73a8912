"""
Trip Budget - Source Package

A budgeting ledger for one trip: planned budgets, logged expenses,
and the totals derived from them.

DESIGN PRINCIPLES:
1. One store owns all state; everything else reads copies
2. Aggregates are derived on every read, never stored
3. Nothing is fatal: bad input and bad stored data leave the ledger usable
4. Every mutation is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Trip Budget Team"
