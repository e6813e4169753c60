"""dao-dbc: transaction affinity and query reports over SQLAlchemy.

:class:`TransactionContext` keeps every nested transactional call on the
database resolved by the outermost one. :class:`ReportEngine` runs
:class:`QueryReport` definitions into immutable :class:`ReportResult` tables.
"""

from .exceptions import (
    DaoError,
    DatabaseOperationError,
    DatabaseUnavailableError,
    IntegrityConstraintViolation,
    MissingParameterError,
    ReportError,
    ReportNotFoundError,
    ReportQueryError,
)
from .infrastructure import (
    Database,
    DatabaseResolver,
    FailoverDatabaseResolver,
    SqlAlchemyDatabase,
    StaticDatabaseResolver,
)
from .reports import (
    Alignment,
    Column,
    LiteralValue,
    QueryReport,
    ReportEngine,
    ReportParameter,
    ReportRegistry,
    ReportResult,
)
from .services import TransactionContext, transactional

__all__ = [
    "Alignment",
    "Column",
    "DaoError",
    "Database",
    "DatabaseOperationError",
    "DatabaseResolver",
    "DatabaseUnavailableError",
    "FailoverDatabaseResolver",
    "IntegrityConstraintViolation",
    "LiteralValue",
    "MissingParameterError",
    "QueryReport",
    "ReportEngine",
    "ReportError",
    "ReportNotFoundError",
    "ReportParameter",
    "ReportQueryError",
    "ReportRegistry",
    "ReportResult",
    "SqlAlchemyDatabase",
    "StaticDatabaseResolver",
    "TransactionContext",
    "transactional",
]
