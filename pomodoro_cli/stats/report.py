"""Table view of the saved daily records."""

from __future__ import annotations

from rich.table import Table

from ..ui.console import format_duration
from .store import DailyRecord


def build_table(records: list[DailyRecord]) -> Table:
    table = Table(title="Pomodoro Statistics", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Total Work Time", justify="right")
    table.add_column("Total Break Time", justify="right")
    table.add_column("Completed Cycles", justify="right")

    for record in records:
        table.add_row(
            record.id,
            format_duration(record.total_work_seconds),
            format_duration(record.total_break_seconds),
            str(record.completed_work_sessions),
        )
    return table
