"""
Query handler: fetch records, project them, and wrap the result per query.

Usage (example from a data-source backend):
    from harper_frames.handler import query_data
    from harper_frames.sources import StaticRecordSource

    responses = query_data([FrameQuery(refId="A", metric="cpu")], StaticRecordSource(records))
    print(responses["A"]["frame"])

Each query is isolated: a failure is reported in that query's response and
never affects the other queries of the batch.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypedDict

from harper_frames.config import Settings, get_settings
from harper_frames.domain.errors import ProjectionError, RecordSourceError
from harper_frames.domain.models import (
    DataQualityWarning,
    FrameQuery,
    LongTable,
    WideTable,
)
from harper_frames.frames import to_frame
from harper_frames.projection import (
    flatten_nested,
    has_nested,
    pivot,
    project,
    select_columns,
    unify,
)
from harper_frames.sources.abstract import RecordSource
from harper_frames.utils.logging import get_logger

log = get_logger(__name__)

STATUS_OK = "ok"
STATUS_BAD_REQUEST = "bad_request"
STATUS_INTERNAL = "internal"


class QueryResponse(TypedDict, total=False):
    """
    Per-query response envelope.

    `frame` is present only when `status` is "ok"; `error` only otherwise.
    """

    ref_id: str
    status: str
    frame: Dict[str, Any]
    error: Optional[str]
    rows: int
    columns: int
    warnings: int
    duration_seconds: float


@dataclass
class ProjectionResult:
    long: LongTable
    wide: WideTable
    warnings: List[DataQualityWarning] = field(default_factory=list)


def build_tables(
    records: Sequence[Any],
    key_column: str,
    discriminator: str = "",
    attributes: Iterable[str] = (),
    qualify: bool = True,
    flatten: bool = False,
) -> ProjectionResult:
    """
    Run unify -> project -> pivot over one batch of records.

    A batch with no records, or with records carrying no attribute besides the
    discriminator, yields an empty wide table rather than an error.
    """
    if flatten and has_nested(records):
        records = flatten_nested(records)

    columns = unify(records, discriminator)
    columns = select_columns(columns, attributes, keep=[key_column])
    long = project(records, columns, discriminator)

    if not long.rows or not long.columns:
        log.info(
            "No projectable data",
            extra={"records": len(long.rows), "columns": len(long.columns)},
        )
        wide = pivot(LongTable(columns=long.columns), key_column, discriminator, qualify)
    else:
        wide = pivot(long, key_column, discriminator, qualify)

    return ProjectionResult(long=long, wide=wide, warnings=long.warnings + wide.warnings)


def resolve_query(query: FrameQuery, settings: Optional[Settings] = None) -> FrameQuery:
    """Fill the optional projection fields of `query` from settings."""
    settings = settings or get_settings()
    return query.model_copy(
        update={
            "key_column": query.key_column or settings.default_key_column,
            "discriminator": (
                query.discriminator
                if query.discriminator is not None
                else settings.default_discriminator
            ),
            "qualify_columns": (
                query.qualify_columns
                if query.qualify_columns is not None
                else settings.qualify_columns
            ),
            "flatten_nested": (
                query.flatten_nested if query.flatten_nested is not None else settings.flatten_nested
            ),
        }
    )


def run_query(
    query: FrameQuery, source: RecordSource, settings: Optional[Settings] = None
) -> QueryResponse:
    """
    Execute a single query against `source` and build its response.

    Parameters
    ----------
    query : FrameQuery
        Query description; unset projection options fall back to settings.
    source : RecordSource
        Supplier of raw records for the query.
    settings : Settings | None
        Overrides the cached settings (mainly for tests).

    Returns
    -------
    QueryResponse
        Status "ok" with a frame, or "bad_request" / "internal" with an error.
    """
    settings = settings or get_settings()
    resolved = resolve_query(query, settings)
    start = time.perf_counter()

    log.info(
        f"[QUERY START] {resolved.ref_id}",
        extra={"ref_id": resolved.ref_id, "metric": resolved.metric, "source": source.name},
    )
    try:
        records = source.fetch(resolved)
        result = build_tables(
            records,
            key_column=resolved.key_column,
            discriminator=resolved.discriminator,
            attributes=resolved.attributes,
            qualify=resolved.qualify_columns,
            flatten=resolved.flatten_nested,
        )
    except (ProjectionError, RecordSourceError) as exc:
        log.warning(
            f"[QUERY FAILED] {resolved.ref_id}",
            extra={"ref_id": resolved.ref_id, "error": str(exc)},
        )
        return QueryResponse(
            ref_id=resolved.ref_id,
            status=STATUS_BAD_REQUEST,
            error=str(exc),
            duration_seconds=time.perf_counter() - start,
        )
    except Exception as exc:  # noqa: BLE001 - broad catch to record per-query failures
        log.exception(f"[QUERY FAILED] {resolved.ref_id}", extra={"ref_id": resolved.ref_id})
        return QueryResponse(
            ref_id=resolved.ref_id,
            status=STATUS_INTERNAL,
            error=str(exc),
            duration_seconds=time.perf_counter() - start,
        )

    frame = to_frame(
        result.wide,
        ref_id=resolved.ref_id,
        name=resolved.metric,
        warnings=result.warnings,
        max_notices=settings.max_notices,
    )
    response = QueryResponse(
        ref_id=resolved.ref_id,
        status=STATUS_OK,
        frame=frame,
        rows=len(result.wide.rows),
        columns=len(result.wide.columns),
        warnings=len(result.warnings),
        duration_seconds=time.perf_counter() - start,
    )
    log.info(
        f"[QUERY SUCCESS] {resolved.ref_id}",
        extra={
            "ref_id": resolved.ref_id,
            "rows": response["rows"],
            "columns": response["columns"],
            "warnings": response["warnings"],
        },
    )
    return response


def query_data(
    queries: Iterable[FrameQuery], source: RecordSource, settings: Optional[Settings] = None
) -> Dict[str, QueryResponse]:
    """Run each query in turn; responses are keyed by ref_id."""
    return {query.ref_id: run_query(query, source, settings) for query in queries}


async def query_data_async(
    queries: Iterable[FrameQuery], source: RecordSource, settings: Optional[Settings] = None
) -> Dict[str, QueryResponse]:
    """
    Run the queries of a batch concurrently, one worker thread per query.

    Projection holds no shared state, so queries only share `source`, which
    must tolerate concurrent `fetch` calls.
    """
    batch = list(queries)
    responses = await asyncio.gather(
        *(asyncio.to_thread(run_query, query, source, settings) for query in batch)
    )
    return {query.ref_id: response for query, response in zip(batch, responses)}


__all__ = [
    "ProjectionResult",
    "QueryResponse",
    "STATUS_BAD_REQUEST",
    "STATUS_INTERNAL",
    "STATUS_OK",
    "build_tables",
    "query_data",
    "query_data_async",
    "resolve_query",
    "run_query",
]
