"""
Error taxonomy for the actionable store.

Storage failures surface as `StoreError` (wrapping the underlying sqlite3
error). Not-found deletes and empty queries are not errors.
"""

from __future__ import annotations


class StoreError(Exception):
    """A store operation failed in the storage medium."""


class BatchInsertError(StoreError):
    """A batch insert failed and was rolled back as a whole."""


class StoreClosedError(StoreError):
    """The storage handle was already closed."""


__all__ = ["StoreError", "BatchInsertError", "StoreClosedError"]
