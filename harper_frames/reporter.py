from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from harper_frames.domain.models import DataQualityWarning, Kind, WideTable

KIND_STYLES = {
    Kind.string: "cyan",
    Kind.boolean: "magenta",
    Kind.float: "green",
    Kind.integer: "green",
    Kind.timestamp: "blue",
    Kind.null: "dim",
}


def format_cell(value: Any) -> str:
    if value is None:
        return "[dim]null[/dim]"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, float):
        return f"{value:,.4g}"
    return str(value)


def print_table(
    wide: WideTable,
    title: Optional[str] = None,
    warnings: Sequence[DataQualityWarning] = (),
    console: Optional[Console] = None,
) -> None:
    """
    Render a wide table as a rich table.

    Column headers show the column kind; null cells are dimmed. Data-quality
    warnings, if any, are listed below the table.
    """
    console = console or Console()

    if not wide.columns:
        console.print("[yellow]No columns to display.[/yellow]")
        return

    caption = f"{len(wide.rows):,} rows │ {len(wide.columns):,} columns"
    if warnings:
        caption = f"{caption} │ {len(warnings):,} warnings"

    table = Table(title=escape(title) if title else None, box=box.ROUNDED, caption=caption)
    for col in wide.columns:
        header = f"{escape(col.name)}\n[dim]({col.kind.value})[/dim]"
        justify = "right" if col.kind in (Kind.float, Kind.integer) else "left"
        table.add_column(header, justify=justify, style=KIND_STYLES[col.kind], no_wrap=True)

    for row in wide.rows:
        table.add_row(*(format_cell(value) for value in row))

    console.print(table)
    if wide.is_empty:
        console.print("[yellow]No data in range.[/yellow]")

    for warning in warnings:
        code = escape(f"[{warning.code}]")
        console.print(f"[yellow]warning[/yellow] {code} {escape(warning.message)}")
