"""
SQLite storage handle for the actionable store.

A `Database` owns exactly one sqlite3 connection for the lifetime of the
process. It is created once (see `open_database`) and handed to every store
that needs it; stores sharing a handle are serialized through its lock, so a
write that has completed is visible to every read issued after it.

Opening the file retries transient `sqlite3.OperationalError` using tenacity.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from actionable_store.config import get_settings
from actionable_store.exceptions import StoreClosedError
from actionable_store.utils.logging import get_logger

log = get_logger(__name__)

MEMORY_PATH = ":memory:"

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS device_actionables (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp INTEGER NOT NULL,
        payload TEXT NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_device_actionables_timestamp
    ON device_actionables (timestamp DESC, id DESC)
    """,
)


class Database:
    """
    Thread-safe owner of the SQLite connection backing the store.

    Parameters
    ----------
    path : Path | str
        Database file, or ":memory:" for a private in-memory database.
    busy_timeout_ms : int
        How long SQLite waits on a locked file before failing.
    """

    def __init__(self, path: Path | str, busy_timeout_ms: int = 5000) -> None:
        self.path = str(path)
        self.busy_timeout_ms = busy_timeout_ms
        self._lock = threading.RLock()
        self._conn: Optional[sqlite3.Connection] = self._connect()
        try:
            self._init_schema()
        except Exception:
            self.close()
            raise

    def _connect(self) -> sqlite3.Connection:
        if self.path != MEMORY_PATH:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        # isolation_level=None: transactions are opened explicitly in transaction().
        conn = sqlite3.connect(
            self.path,
            timeout=self.busy_timeout_ms / 1000.0,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout_ms)}")
        if self.path != MEMORY_PATH:
            conn.execute("PRAGMA journal_mode=WAL")
        log.debug("Database opened", extra={"db_path": self.path})
        return conn

    def _init_schema(self) -> None:
        with self.transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreClosedError(f"Database '{self.path}' is closed")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Run a block of writes atomically.

        Commits when the block exits normally and rolls back on any exception,
        which is then re-raised to the caller.

        Example
        -------
            with database.transaction() as conn:
                conn.execute("DELETE FROM device_actionables")
        """
        with self._lock:
            conn = self._require_conn()
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            try:
                conn.execute("COMMIT")
            except sqlite3.Error:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    @contextmanager
    def read(self) -> Generator[sqlite3.Connection, None, None]:
        """Hold the handle for a consistent read."""
        with self._lock:
            yield self._require_conn()

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                log.debug("Database closed", extra={"db_path": self.path})

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
    retry=retry_if_exception_type(sqlite3.OperationalError),
    reraise=True,
)
def open_database(
    path: Path | str | None = None, busy_timeout_ms: int | None = None
) -> Database:
    """
    Open the process-wide database handle with automatic retry.

    Retries up to 3 times with exponential backoff when the file is
    temporarily locked or unavailable.

    Parameters
    ----------
    path : Path | str | None
        Override for `Settings.db_path`.
    busy_timeout_ms : int | None
        Override for `Settings.db_busy_timeout_ms`.

    Returns
    -------
    Database
        An open handle with the schema in place.

    Raises
    ------
    sqlite3.OperationalError
        If the database cannot be opened after all retry attempts.
    """
    settings = get_settings()
    return Database(
        path if path is not None else settings.db_path,
        busy_timeout_ms=(
            busy_timeout_ms if busy_timeout_ms is not None else settings.db_busy_timeout_ms
        ),
    )


__all__ = ["Database", "MEMORY_PATH", "open_database"]
