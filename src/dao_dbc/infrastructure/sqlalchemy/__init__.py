"""SQLAlchemy-backed infrastructure adapters."""

from .database import SqlAlchemyDatabase

__all__ = ["SqlAlchemyDatabase"]
