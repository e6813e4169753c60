"""Transaction services and composition helpers."""

from .container import (
    build_databases,
    build_engine,
    build_report_engine,
    build_resolver,
    build_transaction_context,
    dispose_engines,
)
from .transactions import TransactionContext, transactional

__all__ = [
    "TransactionContext",
    "build_databases",
    "build_engine",
    "build_report_engine",
    "build_resolver",
    "build_transaction_context",
    "dispose_engines",
    "transactional",
]
