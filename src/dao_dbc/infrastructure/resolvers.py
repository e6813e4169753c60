"""Database resolvers deciding which physical database serves a transaction."""

from __future__ import annotations

from typing import Protocol, Sequence

import structlog

from ..exceptions import DatabaseUnavailableError
from .unit_of_work import Database, DatabaseResolver

logger = structlog.get_logger(__name__)


class ProbedDatabase(Database, Protocol):
    """Database that can be probed for liveness."""

    name: str

    def ping(self) -> None:
        """Raise if the database does not answer."""

        raise NotImplementedError


class StaticDatabaseResolver(DatabaseResolver):
    """Always resolve to the same database."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def get_database(self) -> Database:
        return self._database


class FailoverDatabaseResolver(DatabaseResolver):
    """Resolve to the first candidate that answers its probe.

    Candidates are tried in order on every call, so a recovered primary is
    picked up again by the next logical transaction.
    """

    def __init__(self, candidates: Sequence[ProbedDatabase]) -> None:
        if not candidates:
            raise ValueError("at least one candidate database is required")
        self._candidates = tuple(candidates)

    @property
    def candidates(self) -> tuple[ProbedDatabase, ...]:
        return self._candidates

    def get_database(self) -> Database:
        last_error: Exception | None = None
        for position, candidate in enumerate(self._candidates):
            try:
                candidate.ping()
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "database.probe.failure",
                    database=candidate.name,
                    position=position,
                    error=str(exc),
                )
                continue
            if position > 0:
                logger.info(
                    "database.failover",
                    database=candidate.name,
                    position=position,
                )
            return candidate
        raise DatabaseUnavailableError(
            f"none of {len(self._candidates)} candidate databases answered"
        ) from last_error


__all__ = ["FailoverDatabaseResolver", "ProbedDatabase", "StaticDatabaseResolver"]
