"""
Two-table reconciliation.

This submodule classifies rows of two tables by composite key and merges
the resulting buckets into one table:
- engine: matched / left-only / right-only / duplicate-key classification
- unify: key column folding, difference and row status columns
"""

from .engine import reconcile
from .unify import STATUS_COLUMNS, unify

__all__ = [
    'reconcile',
    'unify',
    'STATUS_COLUMNS',
]
