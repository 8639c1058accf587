"""
In-memory record source.

Useful for tests and for callers that already hold the analytics response in
memory and only need it projected.
"""

from __future__ import annotations

from typing import Any, List, Sequence

from harper_frames.config import get_settings
from harper_frames.domain.models import FrameQuery
from harper_frames.sources.abstract import RecordSource
from harper_frames.sources.filters import filter_records


class StaticRecordSource(RecordSource):
    """Serve a fixed list of records, filtered per query."""

    name: str = "static"
    description: str = "Fixed in-memory records filtered by metric, time range and conditions."

    def __init__(self, records: Sequence[Any]) -> None:
        self._records = list(records)

    def fetch(self, query: FrameQuery) -> List[Any]:
        key_column = query.key_column or get_settings().default_key_column
        return filter_records(self._records, query, key_column)


__all__ = ["StaticRecordSource"]
