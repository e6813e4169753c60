"""Name-keyed registry of report definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from ..exceptions import ReportNotFoundError
from .query_report import QueryReport


@dataclass(slots=True)
class ReportRegistry:
    """Keeps one report definition per stable name."""

    reports: Dict[str, QueryReport] = field(default_factory=dict)

    def register(self, report: QueryReport) -> QueryReport:
        """Register ``report``; names must be unique."""

        if report.name in self.reports:
            raise ValueError(f"report {report.name!r} is already registered")
        self.reports[report.name] = report
        return report

    def resolve(self, name: str) -> QueryReport:
        try:
            return self.reports[name]
        except KeyError:
            raise ReportNotFoundError(f"report {name!r} is not registered") from None

    def names(self) -> list[str]:
        return sorted(self.reports)

    def snapshot(self) -> Mapping[str, QueryReport]:
        """Immutable snapshot of registered reports."""

        return dict(self.reports)


__all__ = ["ReportRegistry"]
