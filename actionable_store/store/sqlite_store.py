"""
SQLite-backed actionable store.

All statements run through the shared `Database` handle. Writes happen inside
`Database.transaction()`, so a failure leaves the table exactly as it was
before the call. Every sqlite3 error, and any integer too wide to bind, is
surfaced as `StoreError`. The store never retries on its own.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Generator, List, Sequence

from actionable_store.domain.models import ActionableRecord
from actionable_store.exceptions import BatchInsertError, StoreError
from actionable_store.infrastructure.database import Database
from actionable_store.store.abstract import AbstractActionableStore
from actionable_store.utils.logging import get_logger

log = get_logger(__name__)

_UPSERT_SQL = """
    INSERT INTO device_actionables (id, timestamp, payload)
    VALUES (?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        timestamp = excluded.timestamp,
        payload = excluded.payload
"""
_SELECT_ALL_SQL = """
    SELECT id, timestamp, payload FROM device_actionables
    ORDER BY timestamp DESC, id DESC
"""
_SELECT_RANGE_SQL = """
    SELECT id, timestamp, payload FROM device_actionables
    WHERE timestamp BETWEEN ? AND ?
    ORDER BY timestamp DESC, id DESC
"""


def _row_to_record(row: sqlite3.Row) -> ActionableRecord:
    return ActionableRecord(id=row["id"], timestamp=row["timestamp"], payload=row["payload"])


@contextmanager
def _storage_errors(operation: str) -> Generator[None, None, None]:
    try:
        yield
    except StoreError:
        raise
    except (sqlite3.Error, OverflowError) as exc:
        log.error(
            f"[STORE FAILED] {operation}", extra={"operation": operation, "error": str(exc)}
        )
        raise StoreError(f"{operation} failed: {exc}") from exc


class SqliteActionableStore(AbstractActionableStore):
    """
    Durable, queryable persistence for actionable records.

    Several instances may share one `Database`; they are serialized through it.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def insert(self, record: ActionableRecord) -> int:
        with _storage_errors("insert"):
            with self.database.transaction() as conn:
                cursor = conn.execute(_UPSERT_SQL, (record.id, record.timestamp, record.payload))
                record_id = record.id if record.id is not None else cursor.lastrowid
        log.debug("Actionable stored", extra={"record_id": record_id})
        return int(record_id)

    def insert_batch(self, records: Sequence[ActionableRecord]) -> None:
        if not records:
            return
        rows = [(record.id, record.timestamp, record.payload) for record in records]
        try:
            with self.database.transaction() as conn:
                conn.executemany(_UPSERT_SQL, rows)
        except (sqlite3.Error, OverflowError) as exc:
            log.error(
                "[STORE FAILED] insert_batch",
                extra={"operation": "insert_batch", "batch_size": len(rows), "error": str(exc)},
            )
            raise BatchInsertError(
                f"insert_batch of {len(rows)} records failed and was rolled back: {exc}"
            ) from exc
        log.debug("Actionable batch stored", extra={"batch_size": len(rows)})

    def delete(self, record: ActionableRecord) -> None:
        if record.id is None:
            return
        with _storage_errors("delete"):
            with self.database.transaction() as conn:
                conn.execute("DELETE FROM device_actionables WHERE id = ?", (record.id,))

    def query_all(self) -> List[ActionableRecord]:
        with _storage_errors("query_all"):
            with self.database.read() as conn:
                rows = conn.execute(_SELECT_ALL_SQL).fetchall()
        return [_row_to_record(row) for row in rows]

    def query_range(self, start_time: int, end_time: int) -> List[ActionableRecord]:
        with _storage_errors("query_range"):
            with self.database.read() as conn:
                rows = conn.execute(_SELECT_RANGE_SQL, (start_time, end_time)).fetchall()
        return [_row_to_record(row) for row in rows]

    def prune_older_than(self, threshold_time: int) -> int:
        with _storage_errors("prune_older_than"):
            with self.database.transaction() as conn:
                cursor = conn.execute(
                    "DELETE FROM device_actionables WHERE timestamp < ?", (threshold_time,)
                )
                deleted = cursor.rowcount
        log.info(
            "Pruned actionables",
            extra={"threshold_time": threshold_time, "deleted": deleted},
        )
        return deleted

    def clear(self) -> int:
        with _storage_errors("clear"):
            with self.database.transaction() as conn:
                deleted = conn.execute("DELETE FROM device_actionables").rowcount
        log.info("Cleared actionables", extra={"deleted": deleted})
        return deleted

    def count(self) -> int:
        with _storage_errors("count"):
            with self.database.read() as conn:
                (total,) = conn.execute("SELECT COUNT(*) FROM device_actionables").fetchone()
        return int(total)


__all__ = ["SqliteActionableStore"]
