"""Error taxonomy and helpers shared by the transaction and report layers."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Sequence

from sqlalchemy import exc as sa_exc

__all__ = [
    "DaoError",
    "DatabaseOperationError",
    "IntegrityConstraintViolation",
    "DatabaseUnavailableError",
    "ReportError",
    "ReportNotFoundError",
    "MissingParameterError",
    "ReportQueryError",
    "ExpectedErrors",
    "handle_sqlalchemy_errors",
]

ExpectedErrors = type[BaseException] | tuple[type[BaseException], ...]


class DaoError(Exception):
    """Base class for data-access errors."""


class DatabaseOperationError(DaoError):
    """Raised for unexpected database errors."""


class IntegrityConstraintViolation(DatabaseOperationError):
    """Raised when a database constraint is violated."""


class DatabaseUnavailableError(DaoError):
    """Raised when no physical database can be resolved."""


class ReportError(DaoError):
    """Base class for report definition and execution failures."""


class ReportNotFoundError(ReportError, LookupError):
    """Raised when a report name is not registered."""


class MissingParameterError(ReportError, ValueError):
    """Raised when a named report parameter has no value."""

    def __init__(self, parameter_name: str) -> None:
        super().__init__(f"Parameter required: {parameter_name}")
        self.parameter_name = parameter_name


class ReportQueryError(DatabaseOperationError):
    """Raised when a report statement fails; carries the SQL actually sent."""

    def __init__(self, message: str, *, sql: str, parameters: Sequence[object]) -> None:
        super().__init__(f"{message}\nSQL: {sql}\nParameters: {list(parameters)!r}")
        self.sql = sql
        self.parameters = tuple(parameters)


@dataclass(slots=True)
class _DatabaseContext:
    """Internal helper naming the database in error messages."""

    database: str | None = None

    def format(self, message: str) -> str:
        if self.database:
            return f"{self.database}: {message}"
        return message


def _translate_sqlalchemy_error(exc: Exception, *, context: _DatabaseContext) -> DaoError:
    if isinstance(exc, sa_exc.IntegrityError):
        return IntegrityConstraintViolation(context.format("integrity constraint violated"))
    if isinstance(exc, sa_exc.DBAPIError):
        return DatabaseOperationError(context.format(f"database operation failed: {exc.orig}"))
    return DatabaseOperationError(context.format(str(exc)))


@contextmanager
def handle_sqlalchemy_errors(
    *, database: str | None = None, expected: ExpectedErrors = ()
) -> Iterator[None]:
    """Translate SQLAlchemy errors into package errors.

    Errors matching ``expected`` are re-raised untouched so callers can catch
    a narrower driver-level failure themselves.
    """

    context = _DatabaseContext(database)
    try:
        yield
    except expected:
        raise
    except sa_exc.SQLAlchemyError as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc
