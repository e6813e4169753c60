"""Configuration primitives for the data-access layer."""

from .config import DatabaseSettings

__all__ = ["DatabaseSettings"]
