"""
Pytest configuration for the device actionable store.

Provides fixtures for:
- Settings pointing at a per-test temporary directory
- Database handles (in-memory and file-backed)
- Sync and async stores, optionally seeded
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator, List

import pytest

from actionable_store.config import Settings, get_settings
from actionable_store.domain.models import ActionableRecord
from actionable_store.infrastructure.database import MEMORY_PATH, Database
from actionable_store.store.async_store import AsyncActionableStore
from actionable_store.store.sqlite_store import SqliteActionableStore

SEED_TIMESTAMPS = (100, 200, 300)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        db_path=tmp_path / "actionables.db",
        preferences_path=tmp_path / "analysis_prefs.json",
        log_level="DEBUG",
        maintenance_retry_attempts=3,
        maintenance_retry_wait_seconds=0.0,
    )


@pytest.fixture
def settings_env(
    test_settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> Generator[Settings, None, None]:
    """
    Point the cached `get_settings()` at the temporary test paths.
    """
    monkeypatch.setenv("ACTIONABLE_DB_PATH", str(test_settings.db_path))
    monkeypatch.setenv("ANALYSIS_PREFS_PATH", str(test_settings.preferences_path))
    monkeypatch.setenv("MAINTENANCE_RETRY_WAIT_SECONDS", "0")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """
    Private in-memory database, closed after the test.
    """
    db = Database(MEMORY_PATH)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def file_database(test_settings: Settings) -> Generator[Database, None, None]:
    """
    File-backed database under the test's temporary directory.
    """
    db = Database(test_settings.db_path)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(database: Database) -> SqliteActionableStore:
    return SqliteActionableStore(database)


@pytest.fixture
def seeded_records(store: SqliteActionableStore) -> List[ActionableRecord]:
    """
    Records at timestamps 100, 200 and 300 as stored (ids assigned).
    """
    stored = []
    for ts in SEED_TIMESTAMPS:
        record = ActionableRecord(timestamp=ts, payload=f"payload-{ts}")
        stored.append(record.with_id(store.insert(record)))
    return stored


@pytest.fixture
def async_store(store: SqliteActionableStore) -> Generator[AsyncActionableStore, None, None]:
    facade = AsyncActionableStore(store)
    try:
        yield facade
    finally:
        facade.close()
