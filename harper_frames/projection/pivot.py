"""
Long-to-wide pivot keyed by a shared (usually time) column.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from harper_frames.domain.errors import MissingKeyColumnError
from harper_frames.domain.models import Column, DataQualityWarning, Kind, LongTable, WideTable
from harper_frames.projection.projector import record_warning
from harper_frames.utils.logging import get_logger

log = get_logger(__name__)

NULL_KEY = "null_key"
DUPLICATE_SAMPLE = "duplicate_sample"
DUPLICATE_COLUMN = "duplicate_column"


def _series_order(series: Sequence[Optional[str]]) -> List[Optional[str]]:
    # None (records without a discriminator) sorts ahead of every named series.
    return sorted(set(series), key=lambda value: (value is not None, value or ""))


def _wide_columns(
    series_names: Sequence[Optional[str]],
    value_columns: Sequence[Column],
    discriminator: str,
    qualify: bool,
) -> List[Column]:
    qualify = qualify or len(series_names) > 1
    columns: List[Column] = []
    for series in series_names:
        labels = {discriminator: series} if discriminator and series is not None else {}
        for col in value_columns:
            name = f"{series}.{col.name}" if qualify and series is not None else col.name
            columns.append(Column(name=name, kind=col.kind, labels=labels))
    return columns


def _unique_names(
    key_column: str, columns: Sequence[Column], warnings: List[DataQualityWarning]
) -> List[Column]:
    # A literal dotted attribute can collide with a qualified name; later ones get "#N".
    seen: Set[str] = {key_column}
    unique: List[Column] = []
    for col in columns:
        name = col.name
        suffix = 2
        while name in seen:
            name = f"{col.name}#{suffix}"
            suffix += 1
        if name != col.name:
            record_warning(
                warnings,
                DUPLICATE_COLUMN,
                f"Column name '{col.name}' is produced more than once; renamed to '{name}'",
                column=name,
            )
            col = replace(col, name=name)
        seen.add(name)
        unique.append(col)
    return unique


def _normalize_key(key: Any) -> Any:
    if isinstance(key, float) and math.isnan(key):
        return None
    return key


def pivot(
    long: LongTable, key_column: str, discriminator: str = "", qualify: bool = True
) -> WideTable:
    """
    Fold a LongTable into one row per distinct `key_column` value.

    Each distinct series value in `long.series` contributes one wide column per
    non-key long column. Combinations with no sample at a key are None. Rows
    are ordered by ascending key; rows with a null key are merged into a single
    trailing row and reported.

    Wide column names are unique: when a qualified name repeats an existing one
    (e.g. a literal `a.val` attribute next to series `a`), later occurrences get
    a `#2`, `#3`, ... suffix and a `duplicate_column` warning.

    An empty LongTable yields an empty WideTable holding only the key column
    (check `WideTable.is_empty`); this is a normal "no data in range" result.

    Raises
    ------
    MissingKeyColumnError
        If `long` has rows but no `key_column`.
    """
    key_col = long.column(key_column)
    if not long.rows:
        log.debug("Pivot skipped for empty table", extra={"key_column": key_column})
        return WideTable(
            key_column=key_column,
            columns=[Column(name=key_column, kind=key_col.kind if key_col else Kind.null)],
        )
    if key_col is None:
        raise MissingKeyColumnError(key_column)

    key_index = long.column_names.index(key_column)
    value_indexes = [i for i, col in enumerate(long.columns) if col.name != key_column]
    value_columns = [long.columns[i] for i in value_indexes]

    series_names = _series_order(long.series)
    offsets = {series: n * len(value_indexes) for n, series in enumerate(series_names)}
    width = len(series_names) * len(value_indexes)

    wide = WideTable(key_column=key_column)
    value_wide = _wide_columns(series_names, value_columns, discriminator, qualify)
    wide.columns = [Column(name=key_column, kind=key_col.kind)] + _unique_names(
        key_column, value_wide, wide.warnings
    )

    grouped: Dict[Any, List[Any]] = {}
    seen: Set[Tuple[Any, Optional[str]]] = set()
    for row_index, row in enumerate(long.rows):
        key = _normalize_key(row[key_index])
        series = long.series[row_index]
        cells = grouped.get(key)
        if cells is None:
            cells = grouped[key] = [None] * width

        if (key, series) in seen:
            record_warning(
                wide.warnings,
                DUPLICATE_SAMPLE,
                f"Duplicate sample for series '{series}' at {key_column}={key!r}; "
                "later values overwrite earlier ones",
                column=key_column,
                row=row_index,
            )
        seen.add((key, series))

        base = offsets[series]
        for slot, source in enumerate(value_indexes):
            value = row[source]
            if value is not None:
                cells[base + slot] = value

    keys = sorted(key for key in grouped if key is not None)
    if None in grouped:
        keys.append(None)
        record_warning(
            wide.warnings,
            NULL_KEY,
            f"Samples without a usable '{key_column}' value were grouped into a trailing row",
            column=key_column,
            row=len(keys) - 1,
        )

    wide.rows = [[key] + grouped[key] for key in keys]
    log.debug(
        "Pivoted table",
        extra={"key_column": key_column, "series": len(series_names), "rows": len(wide.rows)},
    )
    return wide


__all__ = ["DUPLICATE_COLUMN", "DUPLICATE_SAMPLE", "NULL_KEY", "pivot"]
