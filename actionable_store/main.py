from __future__ import annotations

import asyncio
import sqlite3
import sys
from contextlib import contextmanager
from typing import Generator, Optional

import typer

from actionable_store.config import Settings, get_settings
from actionable_store.exceptions import StoreError
from actionable_store.infrastructure.database import open_database
from actionable_store.maintenance import MaintenanceDriver, PruneReport, RetentionPolicy
from actionable_store.preferences import AnalysisPreferences
from actionable_store.reporter import print_actionables, print_prune_report
from actionable_store.store.async_store import AsyncActionableStore
from actionable_store.store.sqlite_store import SqliteActionableStore
from actionable_store.utils.logging import configure_logging

app = typer.Typer(help="Device actionable store maintenance CLI.")


@contextmanager
def _open_store(settings: Settings) -> Generator[SqliteActionableStore, None, None]:
    """Open the configured store; storage failures end the command with exit code 1."""
    try:
        database = open_database(settings.db_path, settings.db_busy_timeout_ms)
    except sqlite3.Error as exc:
        typer.echo(f"Could not open {settings.db_path}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    try:
        yield SqliteActionableStore(database)
    except StoreError as exc:
        typer.echo(f"Store error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        database.close()


async def _prune_once(
    store: SqliteActionableStore, settings: Settings, window_hours: Optional[float]
) -> PruneReport:
    async with AsyncActionableStore(store) as async_store:
        driver = MaintenanceDriver.from_settings(async_store, settings=settings)
        if window_hours is not None:
            driver.policy = RetentionPolicy(window_ms=int(window_hours * 60 * 60 * 1000))
        return await driver.run_once()


@app.command()
def info() -> None:
    """
    Show effective configuration values and the number of stored actionables.
    """
    settings = get_settings()
    with _open_store(settings) as store:
        total = store.count()
    typer.echo(
        f"DB={settings.db_path} | records={total} | "
        f"retention={settings.retention_window_hours}h "
        f"interval={settings.maintenance_interval_seconds}s "
        f"retries={settings.maintenance_retry_attempts}"
    )


@app.command("list")
def list_actionables(
    start: Optional[int] = typer.Option(
        None, "--start", "-s", help="Inclusive lower bound (ms since epoch)."
    ),
    end: Optional[int] = typer.Option(
        None, "--end", "-e", help="Inclusive upper bound (ms since epoch)."
    ),
) -> None:
    """
    List stored actionables, newest first.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    with _open_store(settings) as store:
        if start is None and end is None:
            records = store.query_all()
        else:
            records = store.query_range(
                start if start is not None else -sys.maxsize,
                end if end is not None else sys.maxsize,
            )
    print_actionables(records)


@app.command()
def prune(
    window_hours: Optional[float] = typer.Option(
        None,
        "--window-hours",
        "-w",
        min=0,
        help="Override the retention window (default from settings).",
    ),
) -> None:
    """
    Run the maintenance driver once and delete expired actionables.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    with _open_store(settings) as store:
        report = asyncio.run(_prune_once(store, settings, window_hours))
    print_prune_report(report)
    if not report.succeeded:
        raise typer.Exit(code=1)


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm deleting every record."),
) -> None:
    """
    Delete every stored actionable.
    """
    if not yes:
        typer.echo("Refusing to clear without --yes.", err=True)
        raise typer.Exit(code=2)
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    with _open_store(settings) as store:
        deleted = store.clear()
    typer.echo(f"Cleared {deleted} actionable(s).")


@app.command()
def prefs(
    use_backend: Optional[bool] = typer.Option(
        None,
        "--use-backend/--use-local",
        help="Analyse on the backend API or on-device. Omit to show the current value.",
    ),
) -> None:
    """
    Show or change the analysis preference flag.
    """
    preferences = AnalysisPreferences(get_settings().preferences_path)
    if use_backend is not None:
        preferences.set(use_backend)
    typer.echo(f"use_backend_api={preferences.get()}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
