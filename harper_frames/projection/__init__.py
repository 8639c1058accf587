"""
Projection engine for harper-frames.

Re-exports the three stages (unify, project, pivot) and the opt-in nested
flattening pass so callers can import from `harper_frames.projection`.
"""

from harper_frames.projection.flatten import flatten_nested, has_nested
from harper_frames.projection.kinds import classify
from harper_frames.projection.pivot import pivot
from harper_frames.projection.projector import project
from harper_frames.projection.unifier import select_columns, unify

__all__ = [
    "classify",
    "flatten_nested",
    "has_nested",
    "pivot",
    "project",
    "select_columns",
    "unify",
]
