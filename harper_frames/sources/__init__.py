"""
Record sources for harper-frames.

This module re-exports the source interfaces and the bundled local sources so
downstream code can import from `harper_frames.sources` directly.
"""

from harper_frames.sources.abstract import AbstractRecordSource, RecordSource
from harper_frames.sources.json_file import JsonFileSource
from harper_frames.sources.memory import StaticRecordSource

__all__ = [
    # Abstracts
    "AbstractRecordSource",
    "RecordSource",
    # Concrete sources
    "JsonFileSource",
    "StaticRecordSource",
]
