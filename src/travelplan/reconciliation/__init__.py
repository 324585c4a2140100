"""Expense category backfill.

Repairs trip expenses that lost their category by matching their titles
against the trip's activities and resolving the activity's category in the
expense category catalog.
"""

from .engine import ReconciliationEngine, classify
from .matcher import match
from .resolver import resolve
from .updater import BatchUpdater

__all__ = ["BatchUpdater", "ReconciliationEngine", "classify", "match", "resolve"]
