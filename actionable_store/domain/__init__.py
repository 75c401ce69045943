"""
Domain package for the device actionable store.

Exports the record and actionable models shared by the store, the maintenance
driver and consumers. Keep this package focused on data definitions.
"""

from actionable_store.domain.models import Actionable, ActionableRecord, ActionableType

__all__ = [
    "Actionable",
    "ActionableRecord",
    "ActionableType",
]
