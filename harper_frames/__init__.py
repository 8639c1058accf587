"""
harper-frames - typed time-series frames from schemaless analytics records.

This package is the backend core of a visualization data source. Given the
heterogeneous records an analytics query returns, it:

- Unifies their attribute names into a deterministic column order
- Projects them into a rectangular table with one locked kind per column
- Pivots the long table into a wide, per-timestamp table for charting
- Wraps the result in a per-query response envelope with data-quality notices

Data problems inside a batch (conflicting kinds, nested values) degrade single
cells and are reported as warnings; only unreadable input fails a query.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from harper_frames.config import Settings, get_settings
from harper_frames.domain.models import (
    Column,
    FrameQuery,
    Kind,
    LongTable,
    TimeRange,
    WideTable,
)
from harper_frames.handler import QueryResponse, query_data, query_data_async, run_query
from harper_frames.projection import pivot, project, unify
from harper_frames.sources.abstract import AbstractRecordSource, RecordSource
from harper_frames.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Engine
    "unify",
    "project",
    "pivot",
    # Domain
    "Column",
    "FrameQuery",
    "Kind",
    "LongTable",
    "TimeRange",
    "WideTable",
    # Query handling
    "QueryResponse",
    "query_data",
    "query_data_async",
    "run_query",
    # Record sources
    "AbstractRecordSource",
    "RecordSource",
    # Logging
    "configure_logging",
    "get_logger",
]
