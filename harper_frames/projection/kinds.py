"""
Scalar kind classification.

Every raw value is classified exactly once when a record is projected. The
result is either a concrete `Kind` or one of the two explicit non-scalar
outcomes below, so downstream code switches over a finite set instead of
inspecting arbitrary Python types.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Union

from harper_frames.domain.models import Kind

NESTED = "nested"
UNSUPPORTED = "unsupported"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Classification = Union[Kind, str]


def classify(value: Any) -> Classification:
    """Return the Kind of a raw value, or NESTED / UNSUPPORTED."""
    if value is None:
        return Kind.null
    # bool is a subclass of int and must be tested first.
    if isinstance(value, bool):
        return Kind.boolean
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return Kind.integer
        return UNSUPPORTED
    if isinstance(value, float):
        return Kind.float
    if isinstance(value, str):
        return Kind.string
    if isinstance(value, datetime):
        return Kind.timestamp
    if isinstance(value, (Mapping, list, tuple)):
        return NESTED
    return UNSUPPORTED


def is_nested(value: Any) -> bool:
    return classify(value) == NESTED


def normalize(value: Any, kind: Kind) -> Any:
    """Canonical cell value for an already-classified scalar."""
    if kind is Kind.timestamp and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


__all__ = ["INT64_MAX", "INT64_MIN", "NESTED", "UNSUPPORTED", "classify", "is_nested", "normalize"]
