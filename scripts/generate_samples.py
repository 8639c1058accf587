"""
Synthetic analytics record generator for harper-frames.

Writes deterministic pseudo-random records shaped like analytics query
results: several series per timestamp, attributes that only some series
report, occasional nulls, and rare conflicting-kind samples (a gauge briefly
reporting a status string). Output is a JSON array, or JSON lines when the
path ends in .jsonl.
"""

from __future__ import annotations

import json
import random
import sys
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import typer

app = typer.Typer(help="Generate synthetic analytics records as JSON.")

SERIES = ["worker-0", "worker-1", "worker-2", "main"]


def _generate_records(
    timestamps: int,
    interval_seconds: int,
    seed: int,
    conflict_rate: float = 0.0,
    start: datetime | None = None,
) -> list[dict[str, Any]]:
    rng = random.Random(seed)
    origin = start or datetime(2024, 1, 1, tzinfo=UTC)

    records: list[dict[str, Any]] = []
    for step in range(timestamps):
        ts = origin + timedelta(seconds=step * interval_seconds)
        for series in SERIES:
            # Roughly one sample in ten is missing to exercise gap filling.
            if rng.random() < 0.1:
                continue
            record: dict[str, Any] = {
                "id": f"{series}-{step}",
                "metric": "resource-usage",
                "series": series,
                "time": ts.isoformat(),
                "period": interval_seconds,
                "utilization": round(rng.uniform(0, 1), 4),
                "heapUsed": rng.randint(10_000_000, 500_000_000),
            }
            if series != "main":
                record["idle"] = round(rng.uniform(0, interval_seconds * 1000), 2)
            if rng.random() < 0.05:
                record["utilization"] = None
            if conflict_rate and rng.random() < conflict_rate:
                record["utilization"] = "unavailable"
            records.append(record)
    return records


def _write_records(path: Path, records: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        if path.suffix.lower() == ".jsonl":
            for record in records:
                f.write(json.dumps(record) + "\n")
        else:
            json.dump(records, f, indent=2)


@app.command()
def main(
    timestamps: int = typer.Option(
        60,
        "--timestamps",
        "-t",
        help="Number of distinct timestamps to generate.",
    ),
    interval: int = typer.Option(
        10,
        "--interval",
        "-i",
        help="Seconds between timestamps.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    conflict_rate: float = typer.Option(
        0.01,
        "--conflict-rate",
        help="Probability that a sample reports a string where a number is expected.",
    ),
    output: Path = typer.Option(
        Path("samples/records.json"),
        "--output",
        "-o",
        help="Output path (.json for an array, .jsonl for JSON lines).",
    ),
) -> None:
    """
    Generate synthetic analytics records and write them to a file.
    """
    start = time.perf_counter()
    records = _generate_records(timestamps, interval, seed, conflict_rate=conflict_rate)
    _write_records(output, records)
    duration = time.perf_counter() - start
    typer.echo(f"Wrote {len(records):,} records -> {output} in {duration:.2f}s (seed={seed})")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
