"""
Record filters shared by the local record sources.

Remote analytics backends evaluate time windows and conditions server-side;
local sources apply the same semantics here so the handler behaves the same
against either.
"""

from __future__ import annotations

import operator
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from harper_frames.domain.models import Condition, FrameQuery, TimeRange


def _contains(left: Any, right: Any) -> bool:
    return isinstance(left, str) and isinstance(right, str) and right in left


def _starts_with(left: Any, right: Any) -> bool:
    return isinstance(left, str) and isinstance(right, str) and left.startswith(right)


def _ends_with(left: Any, right: Any) -> bool:
    return isinstance(left, str) and isinstance(right, str) and left.endswith(right)


_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "equals": operator.eq,
    "not_equal": operator.ne,
    "greater_than": operator.gt,
    "greater_than_equal": operator.ge,
    "less_than": operator.lt,
    "less_than_equal": operator.le,
    "contains": _contains,
    "starts_with": _starts_with,
    "ends_with": _ends_with,
}


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def matches_condition(record: Mapping, condition: Condition) -> bool:
    if condition.attribute not in record:
        return False
    left = record[condition.attribute]
    right = condition.value
    if isinstance(left, datetime) and isinstance(right, datetime):
        left, right = as_utc(left), as_utc(right)
    try:
        return bool(_COMPARATORS[condition.comparator](left, right))
    except TypeError:
        # Ordering between unrelated types (e.g. str vs int) never matches.
        return False


def matches_conditions(record: Any, conditions: Iterable[Condition]) -> bool:
    """True when `record` satisfies every condition; non-mappings always pass."""
    if not isinstance(record, Mapping):
        return True
    return all(matches_condition(record, condition) for condition in conditions)


def within_time_range(record: Any, key_column: str, time_range: Optional[TimeRange]) -> bool:
    """
    True when the record's key timestamp lies inside `time_range` (inclusive).

    Records whose key is missing or not a datetime are kept so the engine can
    report them rather than having them silently vanish.
    """
    if time_range is None or not isinstance(record, Mapping):
        return True
    value = record.get(key_column)
    if not isinstance(value, datetime):
        return True
    return as_utc(time_range.start) <= as_utc(value) <= as_utc(time_range.end)


METRIC_ATTRIBUTE = "metric"


def filter_records(records: Iterable[Any], query: FrameQuery, key_column: str) -> List[Any]:
    """Apply the metric name, time window and conditions of `query` to `records`."""
    kept: List[Any] = []
    for record in records:
        if (
            query.metric
            and isinstance(record, Mapping)
            and record.get(METRIC_ATTRIBUTE, query.metric) != query.metric
        ):
            continue
        if not within_time_range(record, key_column, query.time_range):
            continue
        if not matches_conditions(record, query.conditions):
            continue
        kept.append(record)
    return kept


__all__ = [
    "METRIC_ATTRIBUTE",
    "as_utc",
    "filter_records",
    "matches_condition",
    "matches_conditions",
    "within_time_range",
]
