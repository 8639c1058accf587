"""
Exception types raised by the projection engine and record sources.

Only query-level failures are exceptions; per-cell data problems are recorded
as DataQualityWarning values on the table instead.
"""

from __future__ import annotations

from typing import Any


class ProjectionError(Exception):
    """Base class for failures that abort projection of a single query."""


class MalformedRecordError(ProjectionError):
    def __init__(self, index: int, value: Any, reason: str = "") -> None:
        self.index = index
        self.value_type = type(value).__name__
        super().__init__(
            reason or f"record {index} is not a mapping (got {self.value_type})"
        )


class MissingKeyColumnError(ProjectionError):
    def __init__(self, key_column: str) -> None:
        self.key_column = key_column
        super().__init__(f"key column '{key_column}' not present in projected columns")


class RecordSourceError(Exception):
    """Raised when a record source cannot produce records for a query."""


__all__ = [
    "MalformedRecordError",
    "MissingKeyColumnError",
    "ProjectionError",
    "RecordSourceError",
]
