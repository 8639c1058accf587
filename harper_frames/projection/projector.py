"""
Columnar projection of heterogeneous records into a LongTable.

Each column's kind is locked by the first non-null scalar seen for it in
record order. Cells that cannot be represented under the locked kind become
None and are reported as data-quality warnings; projection itself only fails
on records that are not mappings at all.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from harper_frames.domain.errors import MalformedRecordError
from harper_frames.domain.models import Column, DataQualityWarning, Kind, LongTable, Record
from harper_frames.projection.kinds import NESTED, UNSUPPORTED, classify, normalize
from harper_frames.utils.logging import get_logger

log = get_logger(__name__)

TYPE_CONFLICT = "type_conflict"
UNSUPPORTED_NESTED = "unsupported_nested"
UNSUPPORTED_VALUE = "unsupported_value"


def record_warning(
    warnings: List[DataQualityWarning],
    code: str,
    message: str,
    column: Optional[str] = None,
    row: Optional[int] = None,
) -> None:
    """Append a warning and log it with structured fields."""
    warnings.append(DataQualityWarning(code=code, message=message, column=column, row=row))
    log.warning(message, extra={"code": code, "column": column, "row": row})


def series_value(record: Record, discriminator: str) -> Optional[str]:
    if not discriminator:
        return None
    value = record.get(discriminator)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def project(
    records: Sequence[Record], columns: Sequence[str], discriminator: str = ""
) -> LongTable:
    """
    Build one row per record aligned to `columns`.

    Parameters
    ----------
    records : Sequence[Record]
        Input records; never mutated.
    columns : Sequence[str]
        Column order, usually the output of `unify`.
    discriminator : str
        Attribute whose value is carried in `LongTable.series` for pivoting.
        Empty string means no series split.

    Returns
    -------
    LongTable
        Rectangular table with one locked kind per column (`Kind.null` for
        columns that never held a value).
    """
    table = LongTable()
    locked: Dict[str, Kind] = {}

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise MalformedRecordError(index, record)

        row: List[Any] = []
        for name in columns:
            if name not in record:
                row.append(None)
                continue

            value = record[name]
            kind = classify(value)

            if kind is Kind.null:
                row.append(None)
            elif kind == NESTED:
                record_warning(
                    table.warnings,
                    UNSUPPORTED_NESTED,
                    f"Nested {type(value).__name__} value in column '{name}' (row {index}) "
                    "was not projected",
                    column=name,
                    row=index,
                )
                row.append(None)
            elif kind == UNSUPPORTED:
                record_warning(
                    table.warnings,
                    UNSUPPORTED_VALUE,
                    f"Unsupported {type(value).__name__} value in column '{name}' (row {index})",
                    column=name,
                    row=index,
                )
                row.append(None)
            else:
                column_kind = locked.setdefault(name, kind)
                if column_kind is kind:
                    row.append(normalize(value, kind))
                else:
                    record_warning(
                        table.warnings,
                        TYPE_CONFLICT,
                        f"Column '{name}' is {column_kind.value} but row {index} holds "
                        f"{kind.value}; cell set to null",
                        column=name,
                        row=index,
                    )
                    row.append(None)

        table.rows.append(row)
        table.series.append(series_value(record, discriminator))

    table.columns = [Column(name=name, kind=locked.get(name, Kind.null)) for name in columns]
    log.debug(
        "Projected records",
        extra={"rows": len(table.rows), "columns": len(table.columns), "warnings": len(table.warnings)},
    )
    return table


__all__ = [
    "TYPE_CONFLICT",
    "UNSUPPORTED_NESTED",
    "UNSUPPORTED_VALUE",
    "project",
    "record_warning",
    "series_value",
]
