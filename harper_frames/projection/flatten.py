"""
Opt-in expansion of nested record values into dotted sub-columns.

Naming rule, applied recursively:

- mapping value ``{"parent": {"child": v}}`` becomes ``parent.child``
- list/tuple value ``{"parent": [a, b]}`` becomes ``parent.0`` and ``parent.1``

Empty mappings and sequences contribute no attributes. When an expanded name
collides with a top-level attribute of the same record, the top-level value
is kept.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from harper_frames.domain.errors import MalformedRecordError
from harper_frames.domain.models import Record
from harper_frames.projection.kinds import is_nested
from harper_frames.utils.logging import get_logger

log = get_logger(__name__)


def has_nested(records: Sequence[Record]) -> bool:
    return any(
        isinstance(record, Mapping) and any(is_nested(value) for value in record.values())
        for record in records
    )


def _expand(prefix: str, value: Any, separator: str, out: Dict[str, Any]) -> None:
    if isinstance(value, Mapping):
        for child, child_value in value.items():
            _expand(f"{prefix}{separator}{child}", child_value, separator, out)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _expand(f"{prefix}{separator}{index}", item, separator, out)
    else:
        out[prefix] = value


def flatten_record(record: Record, separator: str = ".") -> Dict[str, Any]:
    flat: Dict[str, Any] = {name: value for name, value in record.items() if not is_nested(value)}
    for name, value in record.items():
        if not is_nested(value):
            continue
        expanded: Dict[str, Any] = {}
        _expand(name, value, separator, expanded)
        for sub_name, sub_value in expanded.items():
            if sub_name in flat:
                log.warning(
                    f"Flattened attribute '{sub_name}' collides with an existing attribute",
                    extra={"column": sub_name},
                )
                continue
            flat[sub_name] = sub_value
    return flat


def flatten_nested(records: Sequence[Record], separator: str = ".") -> List[Any]:
    """
    Return copies of `records` with nested values expanded.

    Raises
    ------
    MalformedRecordError
        If any element of `records` is not a mapping.
    """
    flattened: List[Any] = []
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise MalformedRecordError(index, record)
        flattened.append(flatten_record(record, separator))
    return flattened


__all__ = ["flatten_nested", "flatten_record", "has_nested"]
