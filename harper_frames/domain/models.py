"""
Domain models for harper-frames.

Defines the scalar `Kind` vocabulary, the long/wide table containers produced
by the projection engine, and the query description handed in by callers.
Tables are plain dataclasses built fresh per query; query descriptions are
frozen Pydantic models so they can be parsed straight from request JSON.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Record = Mapping[str, Any]


class Kind(str, Enum):
    """Closed set of column kinds a projected table can carry."""

    string = "string"
    boolean = "boolean"
    float = "float"
    integer = "integer"
    timestamp = "timestamp"
    null = "null"


@dataclass(frozen=True)
class Column:
    name: str
    kind: Kind = Kind.null
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DataQualityWarning:
    """
    A recoverable data problem noticed while building a table.

    `row` indexes the long table row (or wide table row for pivot warnings);
    either locator may be None when the condition is not cell-specific.
    """

    code: str
    message: str
    column: Optional[str] = None
    row: Optional[int] = None


@dataclass
class LongTable:
    """
    One row per input record, aligned to a fixed column order.

    `series` carries the discriminator value of each row (None when the record
    had none) so pivoting never has to revisit the original records.
    """

    columns: List[Column] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)
    series: List[Optional[str]] = field(default_factory=list)
    warnings: List[DataQualityWarning] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def column(self, name: str) -> Optional[Column]:
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass
class WideTable:
    """
    One row per distinct key value, key column first, then one column per
    (series, attribute) pair.
    """

    key_column: str
    columns: List[Column] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)
    warnings: List[DataQualityWarning] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def is_empty(self) -> bool:
        return not self.rows


class TimeRange(BaseModel):
    """Inclusive query window. Naive bounds are taken as UTC."""

    start: datetime = Field(..., alias="from")
    end: datetime = Field(..., alias="to")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("start", "end")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeRange":
        if self.end < self.start:
            raise ValueError("time range end must not precede start")
        return self


COMPARATORS = (
    "equals",
    "not_equal",
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "contains",
    "starts_with",
    "ends_with",
)


class Condition(BaseModel):
    attribute: str = Field(..., alias="search_attribute")
    comparator: str = Field("equals", alias="search_type")
    value: Any = Field(None, alias="search_value")

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="after")
    def _check_comparator(self) -> "Condition":
        if self.comparator not in COMPARATORS:
            raise ValueError(
                f"Unknown comparator '{self.comparator}'. Available: {', '.join(COMPARATORS)}"
            )
        return self


class FrameQuery(BaseModel):
    """
    A single panel query as received from the visualization front end.

    Optional fields left as None fall back to the values in Settings.
    """

    ref_id: str = Field("A", alias="refId")
    metric: Optional[str] = Field(None, description="Analytics metric name.")
    attributes: List[str] = Field(
        default_factory=list, description="Attribute selection; empty selects all."
    )
    key_column: Optional[str] = Field(None, alias="keyColumn")
    discriminator: Optional[str] = None
    time_range: Optional[TimeRange] = Field(None, alias="timeRange")
    conditions: List[Condition] = Field(default_factory=list)
    qualify_columns: Optional[bool] = Field(None, alias="qualifyColumns")
    flatten_nested: Optional[bool] = Field(None, alias="flattenNested")

    model_config = {"frozen": True, "populate_by_name": True}


__all__ = [
    "COMPARATORS",
    "Column",
    "Condition",
    "DataQualityWarning",
    "FrameQuery",
    "Kind",
    "LongTable",
    "Record",
    "TimeRange",
    "WideTable",
]
