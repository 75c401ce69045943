"""
Seed script for the device actionable store.

Generates deterministic pseudo-random actionables spread over a time window and
loads them with a single atomic batch insert.
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path
from typing import List

import typer

from actionable_store.domain.models import Actionable, ActionableRecord, ActionableType
from actionable_store.infrastructure.database import open_database
from actionable_store.maintenance import current_time_ms
from actionable_store.store.sqlite_store import SqliteActionableStore

app = typer.Typer(help="Generate synthetic actionables and load them into the store.")

_PACKAGES = [
    "com.example.social",
    "com.example.maps",
    "com.example.music",
    "com.example.mail",
    "com.example.game",
]
_MS_PER_HOUR = 60 * 60 * 1000


def _generate_records(count: int, span_hours: float, seed: int, now_ms: int) -> List[ActionableRecord]:
    rng = random.Random(seed)
    span_ms = int(span_hours * _MS_PER_HOUR)
    types = list(ActionableType)

    records: List[ActionableRecord] = []
    for i in range(count):
        kind = rng.choice(types)
        package = rng.choice(_PACKAGES)
        actionable = Actionable(
            id=f"seed-{seed}-{i}",
            type=kind.value,
            description=f"{kind.value.replace('_', ' ')} for {package}",
            package_name=package,
            estimated_battery_savings=round(rng.uniform(0.5, 30.0), 1),
            estimated_data_savings=round(rng.uniform(0.0, 250.0), 1),
            severity=rng.randint(1, 5),
            reason="synthetic seed data",
        )
        timestamp = now_ms - rng.randint(0, span_ms) if span_ms else now_ms
        records.append(actionable.to_record(timestamp))
    return records


@app.command()
def main(
    count: int = typer.Option(
        50,
        "--count",
        "-n",
        min=0,
        help="Number of actionables to generate.",
    ),
    span_hours: float = typer.Option(
        336.0,
        "--span-hours",
        help="Spread timestamps over the last N hours.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    db_path: Path | None = typer.Option(
        None,
        "--db-path",
        help="Optional database path override.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only generate; skip loading into the store.",
    ),
) -> None:
    """
    Generate synthetic actionables and optionally load them into the store.
    """
    start = time.perf_counter()
    records = _generate_records(count, span_hours=span_hours, seed=seed, now_ms=current_time_ms())
    typer.echo(f"Generated {len(records):,} actionables (span={span_hours}h, seed={seed})")

    if dry_run:
        typer.echo("Skipping load (dry-run flag set).")
        return

    with open_database(db_path) as database:
        SqliteActionableStore(database).insert_batch(records)
    typer.echo(f"Loaded {len(records):,} actionables in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
