from __future__ import annotations

from pathlib import Path

import pytest

from dao_dbc.core.config import DatabaseSettings
from dao_dbc.infrastructure.resolvers import FailoverDatabaseResolver, StaticDatabaseResolver
from dao_dbc.infrastructure.sqlalchemy import SqlAlchemyDatabase
from dao_dbc.reports import QueryReport
from dao_dbc.services.container import (
    build_databases,
    build_engine,
    build_report_engine,
    build_resolver,
    build_transaction_context,
)
from tests.helpers.db import FakeResult, SpyReportDatabase


@pytest.mark.unit
def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DAODBC_PRIMARY_URL", "sqlite:///primary.db")
    monkeypatch.setenv("DAODBC_REPLICA_URLS", '["sqlite:///replica.db"]')
    monkeypatch.setenv("DAODBC_ECHO", "true")

    settings = DatabaseSettings.build_default()

    assert settings.urls == ["sqlite:///primary.db", "sqlite:///replica.db"]
    assert settings.echo is True
    assert settings.pool_pre_ping is True


@pytest.mark.unit
def test_engines_are_cached_per_url(tmp_path: Path) -> None:
    settings = DatabaseSettings(primary_url=f"sqlite:///{tmp_path / 'a.db'}")

    assert build_engine(settings.primary_url, settings) is build_engine(
        settings.primary_url, settings
    )


@pytest.mark.unit
def test_single_url_builds_static_resolver(tmp_path: Path) -> None:
    resolver = build_resolver({"primary_url": f"sqlite:///{tmp_path / 'a.db'}"})

    assert isinstance(resolver, StaticDatabaseResolver)
    assert isinstance(resolver.get_database(), SqlAlchemyDatabase)


@pytest.mark.unit
def test_replicas_build_failover_resolver_in_order(tmp_path: Path) -> None:
    settings = DatabaseSettings(
        primary_url=f"sqlite:///{tmp_path / 'primary.db'}",
        replica_urls=[f"sqlite:///{tmp_path / 'replica.db'}"],
        probe_statement="SELECT 2",
    )

    databases = build_databases(settings)
    resolver = build_resolver(settings)

    assert [database.name for database in databases] == settings.urls
    assert isinstance(resolver, FailoverDatabaseResolver)
    assert resolver.get_database().name == settings.primary_url


@pytest.mark.unit
def test_built_services_run_against_configured_database(tmp_path: Path) -> None:
    settings = DatabaseSettings(primary_url=f"sqlite:///{tmp_path / 'svc.db'}")
    context = build_transaction_context(settings)
    context.run_in_transaction(
        lambda conn: conn.exec_driver_sql("CREATE TABLE notes (body TEXT)")
    )
    context.run_in_transaction(
        lambda conn: conn.exec_driver_sql("INSERT INTO notes VALUES ('hello')")
    )

    result = build_report_engine(settings).execute(
        QueryReport("notes", "SELECT body FROM notes")
    )

    assert result.rows == (("hello",),)


class SwitchingResolver:
    """Serves ``current``, which the test replaces to simulate a failover."""

    def __init__(self, current: SpyReportDatabase) -> None:
        self.current = current

    def get_database(self) -> SpyReportDatabase:
        return self.current


@pytest.mark.unit
def test_report_engine_follows_resolver_between_executions() -> None:
    primary = SpyReportDatabase(FakeResult(["n"], [[1]]))
    replica = SpyReportDatabase(FakeResult(["n"], [[2]]))
    resolver = SwitchingResolver(primary)
    engine = build_report_engine(resolver=resolver)
    report = QueryReport("n", "SELECT n")

    first = engine.execute(report)
    resolver.current = replica
    second = engine.execute(report)

    assert first.rows == ((1,),)
    assert second.rows == ((2,),)
    assert primary.executed == [("SELECT n", ())]
    assert replica.executed == [("SELECT n", ())]
    assert (primary.released, replica.released) == (1, 1)
