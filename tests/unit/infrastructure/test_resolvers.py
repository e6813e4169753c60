from __future__ import annotations

import pytest
import sqlalchemy as sa

from dao_dbc.exceptions import DatabaseUnavailableError
from dao_dbc.infrastructure.resolvers import FailoverDatabaseResolver, StaticDatabaseResolver
from dao_dbc.infrastructure.sqlalchemy import SqlAlchemyDatabase


class ProbeStub:
    def __init__(self, name: str, *, healthy: bool = True) -> None:
        self.name = name
        self.healthy = healthy
        self.pings = 0

    def ping(self) -> None:
        self.pings += 1
        if not self.healthy:
            raise ConnectionError(f"{self.name} unreachable")


@pytest.mark.unit
def test_static_resolver_returns_same_database() -> None:
    database = ProbeStub("primary")
    resolver = StaticDatabaseResolver(database)  # type: ignore[arg-type]

    assert resolver.get_database() is database
    assert resolver.get_database() is database


@pytest.mark.unit
def test_failover_prefers_primary_when_healthy() -> None:
    primary = ProbeStub("primary")
    replica = ProbeStub("replica")
    resolver = FailoverDatabaseResolver([primary, replica])  # type: ignore[list-item]

    assert resolver.get_database() is primary
    assert replica.pings == 0


@pytest.mark.unit
def test_failover_switches_to_replica_and_back() -> None:
    primary = ProbeStub("primary", healthy=False)
    replica = ProbeStub("replica")
    resolver = FailoverDatabaseResolver([primary, replica])  # type: ignore[list-item]

    assert resolver.get_database() is replica

    primary.healthy = True
    assert resolver.get_database() is primary


@pytest.mark.unit
def test_failover_raises_when_nothing_answers() -> None:
    resolver = FailoverDatabaseResolver(
        [ProbeStub("primary", healthy=False), ProbeStub("replica", healthy=False)]  # type: ignore[list-item]
    )

    with pytest.raises(DatabaseUnavailableError) as excinfo:
        resolver.get_database()

    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert "replica" in str(excinfo.value.__cause__)


@pytest.mark.unit
def test_failover_requires_candidates() -> None:
    with pytest.raises(ValueError):
        FailoverDatabaseResolver([])


@pytest.mark.unit
def test_failover_probes_real_databases() -> None:
    broken = SqlAlchemyDatabase(
        sa.create_engine("sqlite://"), name="broken", probe_statement="SELECT * FROM nowhere"
    )
    healthy = SqlAlchemyDatabase(sa.create_engine("sqlite://"), name="healthy")
    resolver = FailoverDatabaseResolver([broken, healthy])

    assert resolver.get_database() is healthy
