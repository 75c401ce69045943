"""
History state holder: the consumer side of the actionable store.

Loads stored actionables for display and records freshly produced ones. Store
failures never escape: the last known-good records are kept and a
human-readable error message is set instead.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from actionable_store.domain.models import Actionable, ActionableRecord
from actionable_store.exceptions import StoreError
from actionable_store.maintenance import current_time_ms
from actionable_store.store.async_store import AsyncActionableStore
from actionable_store.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    record: ActionableRecord
    actionable: Optional[Actionable]


@dataclass(frozen=True)
class HistoryState:
    entries: Tuple[HistoryEntry, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None


def _decode(record: ActionableRecord) -> HistoryEntry:
    try:
        return HistoryEntry(record=record, actionable=Actionable.from_record(record))
    except ValidationError:
        # Payload written by another producer; keep the raw record.
        return HistoryEntry(record=record, actionable=None)


class ActionableHistory:
    """
    Holds the list of stored actionables shown to the user.

    Parameters
    ----------
    store : AsyncActionableStore
        Where actionables are read from and written to.
    """

    def __init__(self, store: AsyncActionableStore) -> None:
        self.store = store
        self.state = HistoryState()

    async def refresh(
        self, start_time: Optional[int] = None, end_time: Optional[int] = None
    ) -> HistoryState:
        """Reload entries, optionally restricted to [start_time, end_time]."""
        self.state = replace(self.state, is_loading=True, error=None)
        try:
            if start_time is None and end_time is None:
                records = await self.store.query_all()
            else:
                records = await self.store.query_range(
                    start_time if start_time is not None else 0,
                    end_time if end_time is not None else current_time_ms(),
                )
        except asyncio.CancelledError:
            self.state = replace(self.state, is_loading=False)
            raise
        except StoreError as exc:
            log.warning("Failed to load actionables", extra={"error": str(exc)})
            self.state = replace(
                self.state,
                is_loading=False,
                error="Actionables are temporarily unavailable. Please try again.",
            )
            return self.state

        self.state = HistoryState(entries=tuple(_decode(record) for record in records))
        return self.state

    async def record(
        self, actionables: Sequence[Actionable], timestamp: Optional[int] = None
    ) -> bool:
        """
        Persist a new set of actionables under one timestamp and reload.

        Returns False (and sets `state.error`) when the batch could not be stored.
        """
        if not actionables:
            return True
        ts = timestamp if timestamp is not None else current_time_ms()
        records: List[ActionableRecord] = [item.to_record(ts) for item in actionables]
        try:
            await self.store.insert_batch(records)
        except StoreError as exc:
            log.warning(
                "Failed to save actionables",
                extra={"batch_size": len(records), "error": str(exc)},
            )
            self.state = replace(
                self.state, error="New recommendations could not be saved. Please try again."
            )
            return False
        await self.refresh()
        return True


__all__ = ["ActionableHistory", "HistoryEntry", "HistoryState"]
