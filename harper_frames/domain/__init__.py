"""
Domain package for harper-frames.

Exports the table containers, kinds, query models and error types shared by
the projection engine, record sources and the query handler.
"""

from harper_frames.domain.errors import (
    MalformedRecordError,
    MissingKeyColumnError,
    ProjectionError,
    RecordSourceError,
)
from harper_frames.domain.models import (
    Column,
    Condition,
    DataQualityWarning,
    FrameQuery,
    Kind,
    LongTable,
    Record,
    TimeRange,
    WideTable,
)

__all__ = [
    "Column",
    "Condition",
    "DataQualityWarning",
    "FrameQuery",
    "Kind",
    "LongTable",
    "Record",
    "TimeRange",
    "WideTable",
    "MalformedRecordError",
    "MissingKeyColumnError",
    "ProjectionError",
    "RecordSourceError",
]
