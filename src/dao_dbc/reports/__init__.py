"""Parameterized SQL reports with generically renderable results."""

from .query_report import ParameterValues, QueryReport
from .reports_engine import (
    ReportEngine,
    alignment_for_type,
    materialize_value,
    resolve_parameters,
)
from .reports_models import (
    Alignment,
    Column,
    LiteralValue,
    ReportParameter,
    ReportResult,
    ReportValue,
    ValueKind,
    value_kind,
)
from .reports_registry import ReportRegistry

__all__ = [
    "Alignment",
    "Column",
    "LiteralValue",
    "ParameterValues",
    "QueryReport",
    "ReportEngine",
    "ReportParameter",
    "ReportRegistry",
    "ReportResult",
    "ReportValue",
    "ValueKind",
    "alignment_for_type",
    "materialize_value",
    "resolve_parameters",
    "value_kind",
]
