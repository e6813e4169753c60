"""Value objects describing report definitions and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Union

ReportValue = Union[
    None,
    bool,
    int,
    float,
    Decimal,
    str,
    bytes,
    date,
    datetime,
    time,
    timedelta,
    "tuple[ReportValue, ...]",
]


class Alignment(str, Enum):
    """Rendering hint derived from a column's SQL type."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ValueKind(str, Enum):
    """Tag of a :data:`ReportValue`."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    TEXT = "text"
    TEMPORAL = "temporal"
    BINARY = "binary"
    SEQUENCE = "sequence"


def value_kind(value: ReportValue) -> ValueKind:
    """Return the tag of a materialized report value."""

    if value is None:
        return ValueKind.NULL
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMERIC
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (date, time, timedelta)):
        return ValueKind.TEMPORAL
    if isinstance(value, bytes):
        return ValueKind.BINARY
    if isinstance(value, tuple):
        return ValueKind.SEQUENCE
    raise TypeError(f"not a report value: {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class ReportParameter:
    """Named placeholder substituted from caller-supplied values."""

    name: str
    label: str = ""
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("parameter name must not be empty")
        if not self.label:
            object.__setattr__(self, "label", self.name)


@dataclass(frozen=True, slots=True)
class LiteralValue:
    """Literal bound as is, even if it looks like a parameter."""

    value: object


@dataclass(frozen=True, slots=True)
class Column:
    """Result column with its display label and alignment."""

    name: str
    label: str
    alignment: Alignment


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Materialized report output, free of live database handles."""

    columns: tuple[Column, ...] = ()
    rows: tuple[tuple[ReportValue, ...], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"row {index} has {len(row)} values, expected {width}"
                )

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def as_dicts(self) -> list[dict[str, ReportValue]]:
        """Return rows keyed by column name (later duplicates win)."""

        names = self.column_names
        return [dict(zip(names, row)) for row in self.rows]


__all__ = [
    "Alignment",
    "Column",
    "LiteralValue",
    "ReportParameter",
    "ReportResult",
    "ReportValue",
    "ValueKind",
    "value_kind",
]
