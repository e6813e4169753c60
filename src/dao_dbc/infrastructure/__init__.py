"""Infrastructure adapters and collaborator contracts for dao-dbc."""

from __future__ import annotations

from .resolvers import FailoverDatabaseResolver, ProbedDatabase, StaticDatabaseResolver
from .sqlalchemy import SqlAlchemyDatabase
from .unit_of_work import Database, DatabaseResolver, QueryResult, UnitOfWork

__all__ = [
    "Database",
    "DatabaseResolver",
    "FailoverDatabaseResolver",
    "ProbedDatabase",
    "QueryResult",
    "SqlAlchemyDatabase",
    "StaticDatabaseResolver",
    "UnitOfWork",
]
