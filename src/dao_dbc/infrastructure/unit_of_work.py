"""Collaborator protocols consumed by the transaction and report layers.

A :class:`Database` is one physical database endpoint. A
:class:`DatabaseResolver` decides which endpoint should serve the next
logical transaction.
"""

from __future__ import annotations

from typing import Any, Callable, ContextManager, Iterable, Protocol, Sequence, TypeVar

from sqlalchemy import Connection

from ..exceptions import ExpectedErrors

V = TypeVar("V")

UnitOfWork = Callable[[Connection], V]


class QueryResult(Protocol):
    """Subset of :class:`sqlalchemy.engine.CursorResult` read by reports."""

    cursor: Any

    def keys(self) -> Iterable[str]:
        """Return column names in result-set order."""

        raise NotImplementedError

    def __iter__(self) -> Any:
        raise NotImplementedError


class Database(Protocol):
    """Runs units of work against a single physical database."""

    def call_unit_of_work(
        self, work: Callable[[Connection], V], *, expected: ExpectedErrors = ()
    ) -> V:
        """Execute ``work`` under one connection, committing on success."""

        raise NotImplementedError

    def run_unit_of_work(
        self, work: Callable[[Connection], object], *, expected: ExpectedErrors = ()
    ) -> None:
        """Execute ``work`` under one connection, discarding its result."""

        raise NotImplementedError

    def acquire_connection(self, *, read_only: bool) -> ContextManager[Connection]:
        """Return a scoped connection released when the context exits."""

        raise NotImplementedError

    def bind_parameters(self, values: Sequence[object]) -> tuple[object, ...]:
        """Convert resolved values into driver-ready positional parameters."""

        raise NotImplementedError

    def execute_query(
        self, conn: Connection, sql: str, parameters: Sequence[object]
    ) -> QueryResult:
        """Execute ``sql`` with positional ``parameters`` on ``conn``."""

        raise NotImplementedError


class DatabaseResolver(Protocol):
    """Returns the database that should serve work right now."""

    def get_database(self) -> Database:
        """Resolve the current physical database (may differ between calls)."""

        raise NotImplementedError


__all__ = ["Database", "DatabaseResolver", "QueryResult", "UnitOfWork"]
