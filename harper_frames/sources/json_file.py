"""
JSON file record source.

Reads analytics records exported as a JSON array (``.json``) or as one object
per line (``.jsonl`` / ``.ndjson``). JSON has no timestamp type, so values in
the query's key column are decoded into timezone-aware datetimes when they are
ISO-8601 strings or epoch milliseconds; every other value is left as parsed.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List

from harper_frames.config import get_settings
from harper_frames.domain.errors import RecordSourceError
from harper_frames.domain.models import FrameQuery
from harper_frames.sources.abstract import AbstractRecordSource
from harper_frames.sources.filters import as_utc, filter_records
from harper_frames.utils.logging import get_logger

log = get_logger(__name__)

JSON_LINES_SUFFIXES = (".jsonl", ".ndjson")
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def decode_timestamp(value: Any) -> Any:
    """
    Decode an ISO-8601 string or epoch-milliseconds number into a UTC datetime.

    Values that are neither are returned unchanged.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        try:
            return EPOCH + timedelta(milliseconds=value)
        except (OverflowError, OSError, ValueError):
            return value
    if isinstance(value, str):
        try:
            return as_utc(datetime.fromisoformat(value))
        except ValueError:
            return value
    return value


class JsonFileSource(AbstractRecordSource):
    """Load records from a local JSON or JSON-lines file."""

    name: str = "json_file"
    description: str = "Records exported to a JSON array or JSON-lines file."

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> List[Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RecordSourceError(f"could not read records from '{self.path}': {exc}") from exc

        try:
            if self.path.suffix.lower() in JSON_LINES_SUFFIXES:
                return [json.loads(line) for line in text.splitlines() if line.strip()]
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RecordSourceError(f"invalid JSON in '{self.path}': {exc}") from exc

        if not isinstance(payload, list):
            raise RecordSourceError(
                f"expected a JSON array of records in '{self.path}', got {type(payload).__name__}"
            )
        return payload

    def fetch(self, query: FrameQuery) -> List[Any]:
        key_column = query.key_column or get_settings().default_key_column
        records: List[Any] = []
        for item in self._read():
            if isinstance(item, dict) and key_column in item:
                item = {**item, key_column: decode_timestamp(item[key_column])}
            records.append(item)

        log.debug(
            "Loaded records",
            extra={"path": str(self.path), "records": len(records), "key_column": key_column},
        )
        return filter_records(records, query, key_column)


__all__ = ["JsonFileSource", "decode_timestamp"]
