"""Execution of :class:`QueryReport` definitions into :class:`ReportResult`."""

from __future__ import annotations

import json
import logging
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

import sqlalchemy as sa
from sqlalchemy import Connection
from sqlalchemy import exc as sa_exc
from sqlalchemy.types import TypeEngine

from ..exceptions import MissingParameterError, ReportQueryError
from ..infrastructure.resolvers import StaticDatabaseResolver
from ..infrastructure.unit_of_work import Database, DatabaseResolver, QueryResult
from .query_report import ParameterValues, QueryReport
from .reports_models import (
    Alignment,
    Column,
    LiteralValue,
    ReportParameter,
    ReportResult,
    ReportValue,
)

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (bool, int, float, Decimal, str, bytes, date, time, timedelta)

# DBAPI 2.0 type objects compare equal to the type codes of matching columns.
_DBAPI_TYPE_OBJECTS: tuple[tuple[str, TypeEngine[Any]], ...] = (
    ("NUMBER", sa.Numeric()),
    ("DATETIME", sa.DateTime()),
    ("BINARY", sa.LargeBinary()),
    ("STRING", sa.String()),
)

# PostgreSQL OID 16 (psycopg, psycopg2), type names, and pyodbc's Python types.
_BOOLEAN_TYPE_CODES: tuple[object, ...] = (16, "bool", "boolean", bool)


def resolve_parameters(
    params: Sequence[object], parameter_values: ParameterValues
) -> list[object]:
    """Substitute named parameters, keeping declaration order."""

    resolved: list[object] = []
    for param in params:
        if isinstance(param, ReportParameter):
            value = parameter_values.get(param.name)
            if value is None:
                raise MissingParameterError(param.name)
            resolved.append(value)
        elif isinstance(param, LiteralValue):
            resolved.append(param.value)
        else:
            resolved.append(param)
    return resolved


def alignment_for_type(type_: TypeEngine[Any] | None) -> Alignment:
    """Classify a SQL type: numbers right, booleans and bits center, rest left."""

    if type_ is None:
        return Alignment.LEFT
    if isinstance(type_, sa.Boolean) or type_.__visit_name__.upper() == "BIT":
        return Alignment.CENTER
    # Float, Double and REAL derive from Numeric; Small/BigInteger from Integer
    if isinstance(type_, (sa.Integer, sa.Numeric)):
        return Alignment.RIGHT
    return Alignment.LEFT


def materialize_value(value: object) -> ReportValue:
    """Copy a driver value into a connection-independent report value."""

    if value is None or isinstance(value, _SCALAR_TYPES):
        return value  # type: ignore[return-value]
    if isinstance(value, (list, tuple)):
        return tuple(materialize_value(item) for item in value)
    if isinstance(value, (memoryview, bytearray)):
        return bytes(value)
    if isinstance(value, Mapping):
        # json and hstore columns arrive as dicts
        return json.dumps(value, default=str)
    return str(value)


def _type_from_type_code(dbapi: Any, type_code: object) -> TypeEngine[Any] | None:
    if type_code is None:
        return None
    if _is_boolean_type_code(dbapi, type_code):
        return sa.Boolean()
    if dbapi is None:
        return None
    for attribute, sa_type in _DBAPI_TYPE_OBJECTS:
        type_object = getattr(dbapi, attribute, None)
        if type_object is not None and type_code == type_object:
            return sa_type
    return None


def _is_boolean_type_code(dbapi: Any, type_code: object) -> bool:
    # Type codes may be unhashable DBAPI objects, so compare rather than hash.
    boolean_object = getattr(dbapi, "BOOLEAN", None)
    if boolean_object is not None and type_code == boolean_object:
        return True
    return any(
        type(code) is type(type_code) and type_code == code
        for code in _BOOLEAN_TYPE_CODES
    )


def _type_from_value(value: ReportValue) -> TypeEngine[Any] | None:
    if isinstance(value, bool):
        return sa.Boolean()
    if isinstance(value, int):
        return sa.Integer()
    if isinstance(value, float):
        return sa.Float()
    if isinstance(value, Decimal):
        return sa.Numeric()
    return None


class ReportEngine:
    """Run reports, one connection per execution.

    The database is picked by ``resolver`` at the start of every
    :meth:`execute`, so a failover resolver can move later executions to a
    different database. Passing a plain ``database`` pins the engine to it.
    """

    def __init__(
        self,
        database: Database | None = None,
        *,
        resolver: DatabaseResolver | None = None,
    ) -> None:
        if (database is None) == (resolver is None):
            raise TypeError("ReportEngine needs exactly one of database or resolver")
        self._resolver = resolver or StaticDatabaseResolver(database)

    @property
    def resolver(self) -> DatabaseResolver:
        return self._resolver

    def execute(
        self,
        report: QueryReport,
        parameter_values: ParameterValues | None = None,
    ) -> ReportResult:
        """Execute ``report`` and return its fully materialized result.

        Raises :class:`MissingParameterError` when a named parameter has no
        value and :class:`ReportQueryError` when the database rejects the
        statement. ``after_query`` runs exactly once on every path.
        """

        values: dict[str, Any] = dict(parameter_values or {})
        database = self._resolver.get_database()
        with database.acquire_connection(read_only=report.read_only) as conn:
            in_flight: BaseException | None = None
            try:
                report.before_query(values, conn)
                return self._query(database, report, values, conn)
            except BaseException as exc:
                in_flight = exc
                raise
            finally:
                self._after_query(report, values, conn, in_flight)

    def _query(
        self,
        database: Database,
        report: QueryReport,
        values: Mapping[str, Any],
        conn: Connection,
    ) -> ReportResult:
        sql = report.sql
        bound: tuple[object, ...] = ()
        try:
            bound = database.bind_parameters(resolve_parameters(report.params, values))
            result = database.execute_query(conn, sql, bound)
            report_result = self._materialize(report, result, dialect_dbapi(conn))
        except sa_exc.SQLAlchemyError as exc:
            cause = getattr(exc, "orig", None) or exc
            raise ReportQueryError(
                f"report {report.name!r} failed: {cause}", sql=sql, parameters=bound
            ) from exc
        except Exception as exc:
            exc.add_note(f"SQL: {sql}")
            exc.add_note(f"Parameters: {list(bound)!r}")
            raise
        logger.debug(
            "Report %s returned %s rows",
            report.name,
            len(report_result.rows),
            extra={"report": report.name},
        )
        return report_result

    def _materialize(
        self, report: QueryReport, result: QueryResult, dbapi: Any
    ) -> ReportResult:
        names = list(result.keys())
        description = getattr(getattr(result, "cursor", None), "description", None) or ()
        type_codes = [entry[1] for entry in description]

        rows = tuple(
            tuple(materialize_value(value) for value in row) for row in result
        )

        declared = report.column_types
        columns = []
        for index, name in enumerate(names):
            type_ = declared.get(name)
            if type_ is None and index < len(type_codes):
                type_ = _type_from_type_code(dbapi, type_codes[index])
            if type_ is None:
                type_ = _type_from_value(_first_value(rows, index))
            columns.append(
                Column(
                    name=name,
                    label=report.column_label(name),
                    alignment=alignment_for_type(type_),
                )
            )
        return ReportResult(columns=tuple(columns), rows=rows)

    def _after_query(
        self,
        report: QueryReport,
        values: Mapping[str, Any],
        conn: Connection,
        in_flight: BaseException | None,
    ) -> None:
        try:
            report.after_query(values, conn)
        except Exception as exc:
            if in_flight is None:
                raise
            logger.exception(
                "after_query of report %s failed while another error was raised",
                report.name,
                exc_info=exc,
            )
            in_flight.add_note(f"after_query cleanup also failed: {exc!r}")


def dialect_dbapi(conn: Connection) -> Any:
    """Return the DBAPI module behind ``conn``, if SQLAlchemy exposes one."""

    dialect = getattr(conn, "dialect", None)
    return getattr(dialect, "loaded_dbapi", None)


def _first_value(rows: Iterable[Sequence[ReportValue]], index: int) -> ReportValue:
    for row in rows:
        if row[index] is not None:
            return row[index]
    return None


__all__ = [
    "ReportEngine",
    "alignment_for_type",
    "materialize_value",
    "resolve_parameters",
]
