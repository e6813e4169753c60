"""Transaction-scoped database affinity.

A :class:`TransactionContext` resolves a physical database once per logical
transaction and keeps every nested transactional call on that same database,
even if the resolver would answer differently mid-transaction (for instance
after a replica was promoted).
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from functools import wraps
from typing import Callable, Concatenate, ParamSpec, TypeVar

from sqlalchemy import Connection

from ..exceptions import ExpectedErrors
from ..infrastructure.unit_of_work import Database, DatabaseResolver, UnitOfWork

V = TypeVar("V")
P = ParamSpec("P")

logger = logging.getLogger(__name__)


class TransactionContext:
    """Bind one resolved database to the current execution context."""

    def __init__(self, resolver: DatabaseResolver) -> None:
        self._resolver = resolver
        self._bound: ContextVar[Database | None] = ContextVar(
            f"dao_dbc_transaction_database_{id(self)}", default=None
        )

    @property
    def bound_database(self) -> Database | None:
        """Database bound by the transaction running on this context, if any."""

        return self._bound.get()

    def get_database(self) -> Database:
        """Resolve the database a new outermost transaction should use."""

        return self._resolver.get_database()

    def call_in_transaction(
        self, work: UnitOfWork[V], *, expected: ExpectedErrors = ()
    ) -> V:
        """Run ``work`` in a transaction and return its result.

        Nested calls made from inside ``work`` reuse the database bound by the
        outermost call. Failures from resolution or from ``work`` propagate
        unchanged.
        """

        database = self._bound.get()
        if database is not None:
            logger.debug("Reusing bound database %r", database)
            return database.call_unit_of_work(work, expected=expected)

        database = self.get_database()
        token = self._bound.set(database)
        try:
            logger.debug("Bound database %r for transaction", database)
            return database.call_unit_of_work(work, expected=expected)
        finally:
            self._bound.reset(token)

    def run_in_transaction(
        self, work: Callable[[Connection], object], *, expected: ExpectedErrors = ()
    ) -> None:
        """Run ``work`` in a transaction, discarding its result."""

        self.call_in_transaction(work, expected=expected)


def transactional(
    context: TransactionContext, *, expected: ExpectedErrors = ()
) -> Callable[[Callable[Concatenate[Connection, P], V]], Callable[P, V]]:
    """Decorate ``fn(conn, ...)`` so each call runs in ``context``'s transaction.

    Example::

        @transactional(context)
        def rename(conn, account_id, name):
            conn.execute(...)

        rename(42, "ops")
    """

    def decorator(fn: Callable[Concatenate[Connection, P], V]) -> Callable[P, V]:
        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> V:
            return context.call_in_transaction(
                lambda conn: fn(conn, *args, **kwargs), expected=expected
            )

        return wrapper

    return decorator


__all__ = ["TransactionContext", "transactional"]
