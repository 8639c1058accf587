"""
Record source interfaces for harper-frames.

A record source stands in for the analytics API client: given a FrameQuery
(metric, attribute selection, explicit time range, conditions) it returns the
raw records the projection engine consumes. Transport and credentials live
entirely inside concrete sources; the engine only ever sees records.
"""

from __future__ import annotations

import abc
from typing import Any, Protocol, Sequence, runtime_checkable

from harper_frames.domain.models import FrameQuery


@runtime_checkable
class RecordSource(Protocol):
    """
    Common interface all record sources must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of where records come from.
    """

    name: str
    description: str

    def fetch(self, query: FrameQuery) -> Sequence[Any]:
        """
        Return the records answering `query`.

        Elements are expected to be mappings; anything else is passed through
        so the engine can report it as malformed input.

        Raises
        ------
        RecordSourceError
            If the source cannot produce records at all.
        """
        ...


class AbstractRecordSource(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and `description` and implement `fetch`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def fetch(self, query: FrameQuery) -> Sequence[Any]:  # pragma: no cover - interface only
        """Return the records answering `query`."""
        raise NotImplementedError


__all__ = ["AbstractRecordSource", "RecordSource"]
