from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError

from harper_frames.config import get_settings
from harper_frames.domain.errors import ProjectionError, RecordSourceError
from harper_frames.domain.models import FrameQuery, TimeRange
from harper_frames.frames import to_frame, to_records
from harper_frames.handler import STATUS_OK, build_tables, resolve_query
from harper_frames.reporter import print_table
from harper_frames.sources.json_file import JsonFileSource
from harper_frames.utils.logging import configure_logging

app = typer.Typer(help="harper-frames CLI: project analytics records into time-series frames.")

OUTPUT_FORMATS = ("table", "frame", "records")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} log_level={settings.log_level} | "
        f"key={settings.default_key_column} discriminator={settings.default_discriminator} "
        f"qualify={settings.qualify_columns} flatten={settings.flatten_nested} "
        f"max_notices={settings.max_notices}"
    )


@app.command()
def project(
    path: Path = typer.Argument(..., help="JSON array or JSON-lines file of records."),
    key: Optional[str] = typer.Option(
        None, "--key", "-k", help="Key column to pivot on (default from settings)."
    ),
    discriminator: Optional[str] = typer.Option(
        None,
        "--discriminator",
        "-d",
        help="Series attribute; pass an empty string to disable series fan-out.",
    ),
    attributes: Optional[List[str]] = typer.Option(
        None, "--attribute", "-a", help="Attribute to include (repeatable; default all)."
    ),
    metric: Optional[str] = typer.Option(
        None, "--metric", "-m", help="Keep only records whose 'metric' matches."
    ),
    start: Optional[datetime] = typer.Option(None, "--from", help="Start of the time window."),
    end: Optional[datetime] = typer.Option(None, "--to", help="End of the time window."),
    flatten: Optional[bool] = typer.Option(
        None, "--flatten/--no-flatten", help="Expand nested values into dotted columns."
    ),
    qualify: Optional[bool] = typer.Option(
        None, "--qualify/--no-qualify", help="Prefix wide columns with the series value."
    ),
    output: str = typer.Option(
        "table", "--format", "-f", help=f"Output format: {', '.join(OUTPUT_FORMATS)}."
    ),
) -> None:
    """
    Project a file of records into a wide time-series table and print it.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    if output not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"choose one of {', '.join(OUTPUT_FORMATS)}", param_hint="--format"
        )
    if (start is None) != (end is None):
        raise typer.BadParameter("--from and --to must be given together", param_hint="--from")
    try:
        window = TimeRange(start=start, end=end) if start and end else None
    except ValidationError as exc:
        raise typer.BadParameter(
            "; ".join(err["msg"] for err in exc.errors()), param_hint="--from/--to"
        ) from exc

    query = resolve_query(
        FrameQuery(
            ref_id=path.stem,
            metric=metric,
            attributes=attributes or [],
            key_column=key,
            discriminator=discriminator,
            time_range=window,
            qualify_columns=qualify,
            flatten_nested=flatten,
        ),
        settings,
    )

    try:
        records = JsonFileSource(path).fetch(query)
        result = build_tables(
            records,
            key_column=query.key_column,
            discriminator=query.discriminator,
            attributes=query.attributes,
            qualify=query.qualify_columns,
            flatten=query.flatten_nested,
        )
    except (ProjectionError, RecordSourceError) as exc:
        typer.echo(f"Query failed: {exc}", err=True)
        raise typer.Exit(code=1)

    if output == "table":
        print_table(result.wide, title=metric or path.name, warnings=result.warnings)
    elif output == "frame":
        frame = to_frame(
            result.wide,
            ref_id=query.ref_id,
            name=metric,
            warnings=result.warnings,
            max_notices=settings.max_notices,
        )
        typer.echo(json.dumps({"status": STATUS_OK, "frame": frame}, indent=2))
    else:
        typer.echo(json.dumps(to_records(result.wide), indent=2))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
