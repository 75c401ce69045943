"""
Asynchronous facade over a synchronous actionable store.

Every call is handed to a dedicated single worker thread and awaited, so the
event loop never performs storage I/O itself. Calls issued through one facade
run in submission order.

Cancellation: cancelling the awaiting task abandons the result but does not
interrupt a statement the worker has already started. A write that has begun
runs to completion and commits.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from actionable_store.domain.models import ActionableRecord
from actionable_store.exceptions import StoreClosedError
from actionable_store.store.abstract import ActionableStore

T = TypeVar("T")


class AsyncActionableStore:
    """
    Coroutine API for an `ActionableStore`.

    Parameters
    ----------
    store : ActionableStore
        The synchronous store doing the actual work.
    executor : ThreadPoolExecutor | None
        Worker to run store calls on. A private single-thread executor is
        created (and owned) when omitted.
    """

    def __init__(
        self, store: ActionableStore, executor: Optional[ThreadPoolExecutor] = None
    ) -> None:
        self.store = store
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="actionable-store"
        )
        self._closed = False

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        if self._closed:
            raise StoreClosedError("AsyncActionableStore is closed")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(func, *args))

    async def insert(self, record: ActionableRecord) -> int:
        return await self._run(self.store.insert, record)

    async def insert_batch(self, records: Sequence[ActionableRecord]) -> None:
        # Snapshot so later mutation by the caller cannot leak into the batch.
        await self._run(self.store.insert_batch, list(records))

    async def delete(self, record: ActionableRecord) -> None:
        await self._run(self.store.delete, record)

    async def query_all(self) -> List[ActionableRecord]:
        return await self._run(self.store.query_all)

    async def query_range(self, start_time: int, end_time: int) -> List[ActionableRecord]:
        return await self._run(self.store.query_range, start_time, end_time)

    async def prune_older_than(self, threshold_time: int) -> int:
        return await self._run(self.store.prune_older_than, threshold_time)

    async def clear(self) -> int:
        return await self._run(self.store.clear)

    async def count(self) -> int:
        return await self._run(self.store.count)

    def close(self, wait: bool = True) -> None:
        """Stop accepting calls and shut down the owned worker."""
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    async def aclose(self) -> None:
        """Like `close()`, but waits for in-flight calls off the event loop."""
        self._closed = True
        if self._owns_executor:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._executor.shutdown, True)

    async def __aenter__(self) -> "AsyncActionableStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["AsyncActionableStore"]
