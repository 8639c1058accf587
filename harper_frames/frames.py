"""
Serialization of wide tables into the payloads the visualization front end reads.

`to_frame` emits a column-oriented data frame (schema + values) in the shape
used by the data-frame JSON wire format: every field is nullable and carries
its kind, labels and the row order produced by the pivot. `to_records` emits
row dicts for consumers that want plain JSON records.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from harper_frames.domain.models import DataQualityWarning, Kind, WideTable

FIELD_TYPES: Dict[Kind, str] = {
    Kind.string: "string",
    Kind.boolean: "boolean",
    Kind.float: "number",
    Kind.integer: "number",
    Kind.timestamp: "time",
    Kind.null: "other",
}

FRAME_TYPES: Dict[Kind, str] = {
    Kind.string: "string",
    Kind.boolean: "bool",
    Kind.float: "float64",
    Kind.integer: "int64",
    Kind.timestamp: "time.Time",
    Kind.null: "json.RawMessage",
}

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def encode_value(value: Any) -> Any:
    """Timestamps become epoch milliseconds; everything else is already JSON-safe."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - EPOCH) // timedelta(milliseconds=1)
    return value


def to_notices(warnings: Sequence[DataQualityWarning], limit: int) -> List[Dict[str, Any]]:
    notices = [{"severity": "warning", "text": warning.message} for warning in warnings[:limit]]
    if len(warnings) > limit:
        notices.append(
            {"severity": "warning", "text": f"{len(warnings) - limit} more data-quality warnings omitted"}
        )
    return notices


def to_frame(
    wide: WideTable,
    ref_id: str,
    name: Optional[str] = None,
    warnings: Sequence[DataQualityWarning] = (),
    max_notices: int = 50,
) -> Dict[str, Any]:
    fields = [
        {
            "name": col.name,
            "type": FIELD_TYPES[col.kind],
            "typeInfo": {"frame": FRAME_TYPES[col.kind], "nullable": True},
            "labels": dict(col.labels),
        }
        for col in wide.columns
    ]
    values = [[encode_value(row[i]) for row in wide.rows] for i in range(len(wide.columns))]

    schema: Dict[str, Any] = {"refId": ref_id, "name": name or ref_id, "fields": fields}
    notices = to_notices(list(warnings), max_notices)
    if notices:
        schema["meta"] = {"notices": notices}

    return {"schema": schema, "data": {"values": values}}


def to_records(wide: WideTable) -> List[Dict[str, Any]]:
    names = wide.column_names
    return [{name: encode_value(value) for name, value in zip(names, row)} for row in wide.rows]


__all__ = ["FIELD_TYPES", "FRAME_TYPES", "encode_value", "to_frame", "to_notices", "to_records"]
