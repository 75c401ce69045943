from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO

from rich.console import Console

from actionable_store.domain.models import Actionable, ActionableRecord, ActionableType
from actionable_store.maintenance import PruneReport
from actionable_store.reporter import build_actionables_table, print_prune_report

WIDE = 200


def _console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, width=WIDE, color_system=None), buffer


def test_table_has_one_row_per_record():
    actionable = Actionable(
        id="a1",
        type=ActionableType.MANAGE_WAKE_LOCKS.value,
        description="Deny wake locks",
        package_name="com.example.mail",
        estimated_battery_savings=8.5,
    )
    records = [
        actionable.to_record(1_700_000_000_000, record_id=2),
        ActionableRecord(id=1, timestamp=1_600_000_000_000, payload="x" * 100),
    ]

    table = build_actionables_table(records)
    console, buffer = _console()
    console.print(table)
    output = buffer.getvalue()

    assert table.row_count == 2
    assert "manage_wake_locks" in output
    assert "8.5" in output
    assert "x" * 60 + "..." in output


def test_prune_report_failure_message():
    report = PruneReport(
        threshold_time=0,
        started_at=datetime.now(timezone.utc),
        attempts=3,
        error="disk I/O error",
    )
    console, buffer = _console()

    print_prune_report(report, console=console)

    assert "failed after 3 attempt(s)" in buffer.getvalue()
