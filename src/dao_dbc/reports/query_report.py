"""Report definitions backed by a single SQL query."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import Connection
from sqlalchemy.types import TypeEngine

from .reports_models import ReportParameter

ParameterValues = Mapping[str, Any]


class QueryReport:
    """A named, parameterized SQL query with display metadata.

    ``params`` are bound positionally into ``sql``. A :class:`ReportParameter`
    is replaced by the caller's value of the same name; anything else,
    including :class:`~dao_dbc.reports.reports_models.LiteralValue`, is a
    literal. Subclasses may override :meth:`before_query` and
    :meth:`after_query` to set up and drop temporary tables or views; such
    reports must not be read-only.
    """

    def __init__(
        self,
        name: str,
        sql: str,
        params: Sequence[object] = (),
        *,
        read_only: bool = True,
        title: str | None = None,
        description: str | None = None,
        parameters: Iterable[ReportParameter] | None = None,
        column_types: Mapping[str, TypeEngine[Any]] | None = None,
    ) -> None:
        if not name:
            raise ValueError("report name must not be empty")
        self._name = name
        self._sql = sql
        self._params = tuple(params)
        self._read_only = read_only
        self._title = title or name
        self._description = description
        if parameters is None:
            parameters = self._placeholders()
        self._parameters = tuple(parameters)
        self._column_types = dict(column_types or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def params(self) -> tuple[object, ...]:
        return self._params

    @property
    def read_only(self) -> bool:
        return self._read_only

    @property
    def parameters(self) -> tuple[ReportParameter, ...]:
        """Parameters the caller is expected to supply."""

        return self._parameters

    @property
    def column_types(self) -> Mapping[str, TypeEngine[Any]]:
        return dict(self._column_types)

    def title(self, parameter_values: ParameterValues | None = None) -> str:
        """Return the display title; subclasses may use ``parameter_values``."""

        return self._title

    def description(self, parameter_values: ParameterValues | None = None) -> str | None:
        return self._description

    def column_label(self, name: str) -> str:
        """Return the display label of a result column. Defaults to its name."""

        return name

    def before_query(self, parameter_values: ParameterValues, conn: Connection) -> None:
        """Hook run before the query, on the query's connection."""

    def after_query(self, parameter_values: ParameterValues, conn: Connection) -> None:
        """Hook run after the query, even when :meth:`before_query` failed.

        ``conn`` may already be unusable at this point.
        """

    def _placeholders(self) -> list[ReportParameter]:
        seen: dict[str, ReportParameter] = {}
        for param in self._params:
            if isinstance(param, ReportParameter) and param.name not in seen:
                seen[param.name] = param
        return list(seen.values())


__all__ = ["ParameterValues", "QueryReport"]
