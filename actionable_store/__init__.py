"""
Device actionable store - local persistence for battery/usage recommendations.

This package records timestamped "actionable" recommendations produced by
device usage analysis and serves them back to consumers:

- A SQLite-backed store with upsert, atomic batch insert, delete, time-range and
  newest-first queries, age-based pruning and clearing
- An asyncio facade that keeps storage I/O off the event loop
- A retention policy and maintenance driver that prunes expired records
- The analysis preference flag (backend API vs. on-device analysis)
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from actionable_store.config import Settings, get_settings
from actionable_store.domain.models import Actionable, ActionableRecord, ActionableType
from actionable_store.exceptions import BatchInsertError, StoreClosedError, StoreError
from actionable_store.history import ActionableHistory, HistoryState
from actionable_store.infrastructure.database import Database, open_database
from actionable_store.maintenance import MaintenanceDriver, PruneReport, RetentionPolicy
from actionable_store.preferences import AnalysisPreferences
from actionable_store.store.abstract import AbstractActionableStore, ActionableStore
from actionable_store.store.async_store import AsyncActionableStore
from actionable_store.store.sqlite_store import SqliteActionableStore
from actionable_store.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Actionable",
    "ActionableRecord",
    "ActionableType",
    # Errors
    "StoreError",
    "BatchInsertError",
    "StoreClosedError",
    # Storage
    "Database",
    "open_database",
    "ActionableStore",
    "AbstractActionableStore",
    "SqliteActionableStore",
    "AsyncActionableStore",
    # Retention
    "MaintenanceDriver",
    "PruneReport",
    "RetentionPolicy",
    # Consumers
    "ActionableHistory",
    "HistoryState",
    "AnalysisPreferences",
    # Logging
    "configure_logging",
    "get_logger",
]
