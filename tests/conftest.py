from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
import sqlalchemy as sa
from sqlalchemy.engine import Engine

from dao_dbc.services.container import dispose_engines


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    """File-backed SQLite engine so separate connections see committed data."""

    engine = sa.create_engine(f"sqlite:///{tmp_path / 'dao.db'}")
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE accounts ("
            " id INTEGER PRIMARY KEY,"
            " name TEXT NOT NULL UNIQUE,"
            " balance REAL NOT NULL DEFAULT 0,"
            " active BOOLEAN NOT NULL DEFAULT 1"
            ")"
        )
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def _dispose_cached_engines() -> Iterator[None]:
    yield
    dispose_engines()
