"""
Store interfaces for the device actionable store.

Concrete stores implement the `ActionableStore` protocol (or subclass the ABC
helper) so consumers such as the maintenance driver can be handed any
implementation, including test doubles.
"""

from __future__ import annotations

import abc
from typing import List, Protocol, Sequence, runtime_checkable

from actionable_store.domain.models import ActionableRecord


@runtime_checkable
class ActionableStore(Protocol):
    """
    Synchronous contract every actionable store honours.

    Reads are ordered newest first: descending `timestamp`, ties broken by
    descending `id`.
    """

    def insert(self, record: ActionableRecord) -> int:
        """
        Upsert one record.

        Parameters
        ----------
        record : ActionableRecord
            When `record.id` is None a new id is assigned, otherwise the row
            with that id is replaced in full.

        Returns
        -------
        int
            The assigned or confirmed id.
        """
        ...

    def insert_batch(self, records: Sequence[ActionableRecord]) -> None:
        """Upsert all records atomically: all of them become visible or none."""
        ...

    def delete(self, record: ActionableRecord) -> None:
        """Remove the row with `record.id`; a missing row is not an error."""
        ...

    def query_all(self) -> List[ActionableRecord]:
        ...

    def query_range(self, start_time: int, end_time: int) -> List[ActionableRecord]:
        """Records with start_time <= timestamp <= end_time."""
        ...

    def prune_older_than(self, threshold_time: int) -> int:
        """Delete records with timestamp < threshold_time and return how many."""
        ...

    def clear(self) -> int:
        ...

    def count(self) -> int:
        ...


class AbstractActionableStore(abc.ABC):
    """
    Optional ABC helper for class-based implementations.
    """

    @abc.abstractmethod
    def insert(self, record: ActionableRecord) -> int:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def insert_batch(self, records: Sequence[ActionableRecord]) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, record: ActionableRecord) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def query_all(self) -> List[ActionableRecord]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def query_range(
        self, start_time: int, end_time: int
    ) -> List[ActionableRecord]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def prune_older_than(self, threshold_time: int) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def clear(self) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def count(self) -> int:  # pragma: no cover
        raise NotImplementedError


__all__ = [
    "ActionableStore",
    "AbstractActionableStore",
]
