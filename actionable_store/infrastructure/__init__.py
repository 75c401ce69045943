"""
Infrastructure package for the actionable store.

Centralizes storage connectivity (the SQLite handle and its factory). Keep this
layer focused on I/O and resource management, decoupled from store semantics.
"""

from actionable_store.infrastructure.database import MEMORY_PATH, Database, open_database

__all__ = [
    "Database",
    "MEMORY_PATH",
    "open_database",
]
