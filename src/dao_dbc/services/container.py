"""Composition helpers wiring settings into databases, resolvers and services."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from ..core.config import DatabaseSettings
from ..infrastructure.resolvers import FailoverDatabaseResolver, StaticDatabaseResolver
from ..infrastructure.sqlalchemy import SqlAlchemyDatabase
from ..infrastructure.unit_of_work import DatabaseResolver
from ..reports.reports_engine import ReportEngine
from .transactions import TransactionContext

_ENGINE_CACHE: dict[str, Engine] = {}


def _coerce_settings(
    settings: Mapping[str, Any] | DatabaseSettings | None,
) -> DatabaseSettings:
    if isinstance(settings, DatabaseSettings):
        return settings
    if isinstance(settings, Mapping):
        return DatabaseSettings(**dict(settings))
    return DatabaseSettings.build_default()


def build_engine(url: str, settings: DatabaseSettings) -> Engine:
    """Return the cached engine for ``url``, creating it on first use."""

    engine = _ENGINE_CACHE.get(url)
    if engine is None:
        engine = create_engine(
            url,
            echo=settings.echo,
            pool_pre_ping=settings.pool_pre_ping,
        )
        _ENGINE_CACHE[url] = engine
    return engine


def dispose_engines() -> None:
    """Dispose and forget every cached engine."""

    while _ENGINE_CACHE:
        _, engine = _ENGINE_CACHE.popitem()
        engine.dispose()


def build_databases(
    settings: Mapping[str, Any] | DatabaseSettings | None = None,
) -> list[SqlAlchemyDatabase]:
    """Build the primary database followed by its replicas."""

    resolved = _coerce_settings(settings)
    return [
        SqlAlchemyDatabase(
            build_engine(url, resolved),
            probe_statement=resolved.probe_statement,
        )
        for url in resolved.urls
    ]


def build_resolver(
    settings: Mapping[str, Any] | DatabaseSettings | None = None,
) -> DatabaseResolver:
    """Static resolver for a lone primary, failover resolver otherwise."""

    databases = build_databases(settings)
    if len(databases) == 1:
        return StaticDatabaseResolver(databases[0])
    return FailoverDatabaseResolver(databases)


def build_transaction_context(
    settings: Mapping[str, Any] | DatabaseSettings | None = None,
) -> TransactionContext:
    return TransactionContext(build_resolver(settings))


def build_report_engine(
    settings: Mapping[str, Any] | DatabaseSettings | None = None,
    *,
    resolver: DatabaseResolver | None = None,
) -> ReportEngine:
    """Build a report engine that resolves its database on every execution."""

    resolver = resolver or build_resolver(settings)
    return ReportEngine(resolver=resolver)


__all__ = [
    "build_databases",
    "build_engine",
    "build_report_engine",
    "build_resolver",
    "build_transaction_context",
    "dispose_engines",
]
