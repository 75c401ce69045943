from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from actionable_store.domain.models import Actionable, ActionableRecord
from actionable_store.maintenance import PruneReport

_PAYLOAD_PREVIEW_CHARS = 60


def _format_timestamp(timestamp_ms: int) -> str:
    try:
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(timestamp_ms)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def build_actionables_table(records: Sequence[ActionableRecord]) -> Table:
    """
    Render stored actionables as a rich table, newest first as given.

    Payloads that decode as `Actionable` get their own columns; anything else
    is shown as a truncated raw preview.
    """
    table = Table(
        title="Stored Actionables",
        box=box.ROUNDED,
        caption=f"{len(records)} record(s), newest first",
    )
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Time (UTC)", style="magenta", no_wrap=True)
    table.add_column("Type", style="green")
    table.add_column("Package", style="yellow")
    table.add_column("Battery %", justify="right", style="bold green")
    table.add_column("Description")

    for record in records:
        try:
            actionable: Optional[Actionable] = Actionable.from_record(record)
        except ValidationError:
            actionable = None

        if actionable is None:
            preview = record.payload[:_PAYLOAD_PREVIEW_CHARS]
            if len(record.payload) > _PAYLOAD_PREVIEW_CHARS:
                preview += "..."
            table.add_row(
                str(record.id), _format_timestamp(record.timestamp), "-", "-", "-", preview
            )
            continue

        savings = actionable.estimated_battery_savings
        table.add_row(
            str(record.id),
            _format_timestamp(record.timestamp),
            actionable.type,
            actionable.package_name,
            f"{savings:.1f}" if savings is not None else "N/A",
            actionable.description,
        )

    return table


def print_actionables(
    records: Sequence[ActionableRecord], console: Optional[Console] = None
) -> None:
    console = console or Console()
    if not records:
        console.print("[yellow]No actionables stored.[/yellow]")
        return
    console.print(build_actionables_table(records))


def print_prune_report(report: PruneReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    if report.succeeded:
        console.print(
            f"[green]Pruned {report.deleted} actionable(s)[/green] older than "
            f"{_format_timestamp(report.threshold_time)} UTC "
            f"(attempts={report.attempts})."
        )
    else:
        console.print(
            f"[red]Maintenance failed after {report.attempts} attempt(s):[/red] {report.error}"
        )
