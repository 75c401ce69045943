"""
Store package for the device actionable store.

Re-exports the store interfaces and the concrete implementations so downstream
code can import from `actionable_store.store` directly.
"""

from actionable_store.store.abstract import AbstractActionableStore, ActionableStore
from actionable_store.store.async_store import AsyncActionableStore
from actionable_store.store.sqlite_store import SqliteActionableStore

__all__ = [
    # Abstracts
    "AbstractActionableStore",
    "ActionableStore",
    # Concrete stores
    "AsyncActionableStore",
    "SqliteActionableStore",
]
