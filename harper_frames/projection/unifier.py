"""
Schema unification: the column set shared by a batch of heterogeneous records.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, List, Sequence, Set

from harper_frames.domain.errors import MalformedRecordError
from harper_frames.domain.models import Record


def unify(records: Sequence[Record], excluded_attr: str = "") -> List[str]:
    """
    Compute the sorted union of attribute names across `records`.

    A key counts as soon as it is present, whatever its value (None included).
    `excluded_attr` names the discriminator to leave out; an empty string
    excludes nothing. Sorting uses plain `str` ordering, i.e. code point order,
    so the result does not depend on record arrival order or dict ordering.

    Raises
    ------
    MalformedRecordError
        If any element of `records` is not a mapping, or has a non-string key.
    """
    names: Set[str] = set()
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise MalformedRecordError(index, record)
        for name in record.keys():
            if not isinstance(name, str):
                raise MalformedRecordError(
                    index, record, f"record {index} has a non-string attribute name {name!r}"
                )
            names.add(name)
    if excluded_attr:
        names.discard(excluded_attr)
    return sorted(names)


def select_columns(
    columns: Sequence[str], attributes: Iterable[str], keep: Iterable[str] = ()
) -> List[str]:
    """
    Narrow `columns` to an attribute selection, preserving order.

    An empty selection means "all attributes". Names in `keep` survive
    regardless of the selection.
    """
    wanted = set(attributes)
    if not wanted:
        return list(columns)
    wanted.update(keep)
    return [name for name in columns if name in wanted]


__all__ = ["select_columns", "unify"]
