"""SQLAlchemy implementation of :class:`Database`."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from typing import Callable, Iterator, Sequence, TypeVar

import sqlalchemy as sa
from sqlalchemy import Connection
from sqlalchemy.engine import CursorResult, Engine

from ...exceptions import ExpectedErrors, handle_sqlalchemy_errors
from ..unit_of_work import Database

V = TypeVar("V")

logger = logging.getLogger(__name__)


class SqlAlchemyDatabase(Database):
    """One physical database reached through a SQLAlchemy engine.

    Units of work are re-entrant per execution context: a nested
    ``call_unit_of_work`` on the same instance receives the connection of the
    enclosing one instead of opening a second transaction.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        name: str | None = None,
        probe_statement: str = "SELECT 1",
    ) -> None:
        self._engine = engine
        self.name = name or engine.url.render_as_string(hide_password=True)
        self._probe_statement = probe_statement
        self._current: ContextVar[Connection | None] = ContextVar(
            f"dao_dbc_connection_{id(self)}", default=None
        )

    def __repr__(self) -> str:
        return f"SqlAlchemyDatabase({self.name!r})"

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def current_connection(self) -> Connection | None:
        """Connection of the unit of work active on this execution context."""

        return self._current.get()

    # Units of work ------------------------------------------------------

    def call_unit_of_work(
        self, work: Callable[[Connection], V], *, expected: ExpectedErrors = ()
    ) -> V:
        with handle_sqlalchemy_errors(database=self.name, expected=expected):
            conn = self._current.get()
            if conn is not None:
                return work(conn)
            with self._engine.begin() as conn:
                token = self._current.set(conn)
                try:
                    return work(conn)
                finally:
                    self._current.reset(token)

    def run_unit_of_work(
        self, work: Callable[[Connection], object], *, expected: ExpectedErrors = ()
    ) -> None:
        self.call_unit_of_work(work, expected=expected)

    # Connections --------------------------------------------------------

    @contextmanager
    def acquire_connection(self, *, read_only: bool) -> Iterator[Connection]:
        active = self._current.get()
        if active is not None:
            yield active
            return
        with self._engine.connect() as conn:
            if read_only and conn.dialect.name == "postgresql":
                conn = conn.execution_options(postgresql_readonly=True)
            # Closing without commit rolls back, which covers the failure path.
            yield conn
            if read_only:
                conn.rollback()
            else:
                conn.commit()

    def bind_parameters(self, values: Sequence[object]) -> tuple[object, ...]:
        return tuple(self._convert_parameter(value) for value in values)

    def execute_query(
        self, conn: Connection, sql: str, parameters: Sequence[object]
    ) -> CursorResult:
        return conn.exec_driver_sql(sql, tuple(parameters))

    # Maintenance --------------------------------------------------------

    def ping(self) -> None:
        """Run the probe statement, raising if the database does not answer."""

        with self._engine.connect() as conn:
            conn.execute(sa.text(self._probe_statement)).scalar()

    def dispose(self) -> None:
        self._engine.dispose()
        logger.debug("Disposed engine for %s", self.name)

    @staticmethod
    def _convert_parameter(value: object) -> object:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (list, tuple)):
            return [SqlAlchemyDatabase._convert_parameter(item) for item in value]
        return value
