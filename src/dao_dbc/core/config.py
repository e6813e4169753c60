"""Settings for connecting the data-access layer to its databases.

The primary database receives every unit of work by default; replicas are
only consulted by the failover resolver when the primary stops answering the
probe statement. Values are read from ``DAODBC_*`` environment variables.
"""

from __future__ import annotations

from typing import Any, List, cast

from pydantic import Field
from pydantic_settings import BaseSettings


def _settings_config(**config: Any) -> dict[str, Any]:
    """Return a mapping compatible with ``BaseSettings.model_config``."""

    return dict(config)


class DatabaseSettings(BaseSettings):
    """Pydantic settings container for database resolution."""

    model_config = cast(Any, _settings_config(env_prefix="DAODBC_"))

    primary_url: str = Field(
        default="sqlite:///dao.db",
        description="SQLAlchemy URL of the primary database.",
    )
    replica_urls: List[str] = Field(
        default_factory=list,
        description="SQLAlchemy URLs tried in order when the primary is unreachable.",
    )
    echo: bool = Field(
        default=False,
        description="Echo emitted SQL through the sqlalchemy.engine logger.",
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Test pooled connections for liveness before handing them out.",
    )
    probe_statement: str = Field(
        default="SELECT 1",
        min_length=1,
        description="Statement used by the failover resolver to probe a database.",
    )

    @property
    def urls(self) -> list[str]:
        """Primary URL followed by replicas, in resolution order."""

        return [self.primary_url, *self.replica_urls]

    @classmethod
    def build_default(cls) -> "DatabaseSettings":
        """Construct settings from the environment with package defaults."""

        return cls()


__all__ = ["DatabaseSettings"]
