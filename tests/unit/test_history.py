from __future__ import annotations

import asyncio
from typing import List

import pytest

from actionable_store.domain.models import Actionable, ActionableRecord, ActionableType
from actionable_store.exceptions import BatchInsertError, StoreError
from actionable_store.history import ActionableHistory
from actionable_store.store.async_store import AsyncActionableStore


def _actionable(suffix: str) -> Actionable:
    return Actionable(
        id=f"a-{suffix}",
        type=ActionableType.KILL_APP.value,
        description=f"Stop app {suffix}",
        package_name=f"com.example.{suffix}",
        estimated_battery_savings=5.0,
    )


class _FailingStore:
    """Async store double that fails every call."""

    async def query_all(self) -> List[ActionableRecord]:
        raise StoreError("database is locked")

    async def query_range(self, start_time: int, end_time: int) -> List[ActionableRecord]:
        raise StoreError("database is locked")

    async def insert_batch(self, records) -> None:
        raise BatchInsertError("disk full")


@pytest.mark.asyncio
async def test_record_then_refresh_decodes_actionables(async_store: AsyncActionableStore):
    history = ActionableHistory(async_store)

    assert await history.record([_actionable("x"), _actionable("y")], timestamp=500)

    state = history.state
    assert state.error is None
    assert not state.is_loading
    assert {entry.actionable.id for entry in state.entries} == {"a-x", "a-y"}
    assert all(entry.record.timestamp == 500 for entry in state.entries)


@pytest.mark.asyncio
async def test_refresh_range(async_store: AsyncActionableStore):
    history = ActionableHistory(async_store)
    await history.record([_actionable("old")], timestamp=100)
    await history.record([_actionable("new")], timestamp=900)

    state = await history.refresh(start_time=500, end_time=1_000)

    assert [entry.actionable.id for entry in state.entries] == ["a-new"]


@pytest.mark.asyncio
async def test_foreign_payload_kept_as_raw_record(async_store: AsyncActionableStore):
    await async_store.insert(ActionableRecord(timestamp=1, payload="plain text"))

    state = await ActionableHistory(async_store).refresh()

    assert len(state.entries) == 1
    assert state.entries[0].actionable is None
    assert state.entries[0].record.payload == "plain text"


@pytest.mark.asyncio
async def test_failure_preserves_previous_entries(async_store: AsyncActionableStore):
    history = ActionableHistory(async_store)
    await history.record([_actionable("keep")], timestamp=10)
    known_good = history.state.entries

    history.store = _FailingStore()
    state = await history.refresh()

    assert state.entries == known_good
    assert not state.is_loading
    assert state.error is not None
    assert "database is locked" not in state.error


@pytest.mark.asyncio
async def test_failed_save_reports_error_without_raising():
    history = ActionableHistory(_FailingStore())

    saved = await history.record([_actionable("z")], timestamp=1)

    assert saved is False
    assert history.state.error is not None
    assert history.state.entries == ()


@pytest.mark.asyncio
async def test_successful_refresh_clears_previous_error(async_store: AsyncActionableStore):
    history = ActionableHistory(_FailingStore())
    await history.refresh()
    assert history.state.error is not None

    history.store = async_store
    state = await history.refresh()

    assert state.error is None


class _HangingStore:
    """Async store double whose reads never complete."""

    def __init__(self) -> None:
        self.entered = asyncio.Event()

    async def query_all(self) -> List[ActionableRecord]:
        self.entered.set()
        await asyncio.Event().wait()
        return []


@pytest.mark.asyncio
async def test_cancelled_refresh_clears_loading_flag():
    store = _HangingStore()
    history = ActionableHistory(store)

    task = asyncio.create_task(history.refresh())
    await store.entered.wait()
    assert history.state.is_loading

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not history.state.is_loading
