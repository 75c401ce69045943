"""
Retention policy and maintenance driver for the actionable store.

The store never prunes on its own. A driver computes
`threshold = now - retention_window` and asks the store to delete everything
strictly older than that. Failing to prune is not fatal: the store stays
correct, only larger, until the next successful run.

Usage (e.g. from an app lifecycle hook):
    from actionable_store.maintenance import MaintenanceDriver

    driver = MaintenanceDriver.from_settings(async_store)
    report = await driver.run_once()
    print(report.to_dict())
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from actionable_store.config import Settings, get_settings
from actionable_store.exceptions import StoreClosedError, StoreError
from actionable_store.store.async_store import AsyncActionableStore
from actionable_store.utils.logging import get_logger

log = get_logger(__name__)


def current_time_ms() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class RetentionPolicy:
    """Maximum age, in ms, a record may reach before it becomes prunable."""

    window_ms: int

    def __post_init__(self) -> None:
        if self.window_ms < 0:
            raise ValueError(f"window_ms must be non-negative, got {self.window_ms}")

    def threshold(self, now_ms: int) -> int:
        return now_ms - self.window_ms

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RetentionPolicy":
        settings = settings or get_settings()
        return cls(window_ms=settings.retention_window_ms)


@dataclass
class PruneReport:
    """Outcome of a single maintenance run."""

    threshold_time: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    deleted: int = 0
    attempts: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "threshold_time": self.threshold_time,
            "started_at": self.started_at.isoformat(),
            "deleted": self.deleted,
            "attempts": self.attempts,
            "succeeded": self.succeeded,
            "error": self.error,
        }
        if self.completed_at:
            data["completed_at"] = self.completed_at.isoformat()
        return data


class MaintenanceDriver:
    """
    Periodically prunes the store according to a retention policy.

    Parameters
    ----------
    store : AsyncActionableStore
        Store to prune.
    policy : RetentionPolicy
        Decides the prune threshold from "now".
    clock : Callable[[], int]
        Returns "now" in ms since epoch. Injected for tests.
    retry_attempts : int
        Total attempts per run when the store reports a `StoreError`.
    retry_wait_seconds : float
        Base of the exponential backoff between attempts.
    """

    def __init__(
        self,
        store: AsyncActionableStore,
        policy: RetentionPolicy,
        clock: Callable[[], int] = current_time_ms,
        retry_attempts: int = 3,
        retry_wait_seconds: float = 1.0,
    ) -> None:
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")
        self.store = store
        self.policy = policy
        self.clock = clock
        self.retry_attempts = retry_attempts
        self.retry_wait_seconds = retry_wait_seconds

    @classmethod
    def from_settings(
        cls,
        store: AsyncActionableStore,
        settings: Optional[Settings] = None,
        clock: Callable[[], int] = current_time_ms,
    ) -> "MaintenanceDriver":
        settings = settings or get_settings()
        return cls(
            store,
            RetentionPolicy.from_settings(settings),
            clock=clock,
            retry_attempts=settings.maintenance_retry_attempts,
            retry_wait_seconds=settings.maintenance_retry_wait_seconds,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(
                multiplier=self.retry_wait_seconds, max=self.retry_wait_seconds * 10
            ),
            retry=(
                retry_if_exception_type(StoreError)
                & retry_if_not_exception_type(StoreClosedError)
            ),
            before_sleep=before_sleep_log(log, logging.WARNING),
            reraise=True,
        )

    async def run_once(self) -> PruneReport:
        """
        Prune everything older than the policy threshold.

        Store failures are retried, then recorded on the report instead of
        being raised.
        """
        threshold = self.policy.threshold(self.clock())
        report = PruneReport(threshold_time=threshold, started_at=datetime.now(timezone.utc))
        log.info("[MAINTENANCE START]", extra={"threshold_time": threshold})

        try:
            async for attempt in self._retrying():
                with attempt:
                    report.attempts = attempt.retry_state.attempt_number
                    report.deleted = await self.store.prune_older_than(threshold)
        except StoreError as exc:
            report.error = str(exc)
            log.warning(
                "[MAINTENANCE FAILED]",
                extra={"threshold_time": threshold, "attempts": report.attempts, "error": str(exc)},
            )
        else:
            log.info(
                "[MAINTENANCE COMPLETE]",
                extra={"threshold_time": threshold, "deleted": report.deleted},
            )

        report.completed_at = datetime.now(timezone.utc)
        return report

    async def run_forever(
        self, interval_seconds: float, stop_event: Optional[asyncio.Event] = None
    ) -> None:
        """Run `run_once` every `interval_seconds` until `stop_event` is set."""
        stop_event = stop_event or asyncio.Event()
        while not stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
            except asyncio.TimeoutError:
                continue
        log.info("[MAINTENANCE STOPPED]")


__all__ = [
    "MaintenanceDriver",
    "PruneReport",
    "RetentionPolicy",
    "current_time_ms",
]
