"""Per-group rows shared by the tabular, document and text formatters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from waste_reports.common.constants import ALL_TIME_LABEL
from waste_reports.common.models import Report, ReportFilters
from waste_reports.common.time_utils import display_date
from waste_reports.pipeline.aggregate import parse_amount


@dataclass(frozen=True)
class WeightRow:
    name: str
    count: int
    weight: float

    @property
    def average(self) -> float:
        return self.weight / self.count if self.count else 0.0


@dataclass(frozen=True)
class ShareRow:
    """One status bucket with its share of some total (percent or revenue)."""

    name: str
    count: int
    share: float


def date_range_label(filters: ReportFilters | None) -> str:
    if filters is None or filters.date_range is None:
        return ALL_TIME_LABEL
    return filters.date_range.label


def generated_on_label(generated_on: date) -> str:
    return display_date(generated_on)


def weight_rows(report: Report, grouping: str) -> list[WeightRow]:
    return [
        WeightRow(name, int((stats or {}).get("count", 0)), parse_amount((stats or {}).get("weight")))
        for name, stats in report.grouping(grouping).items()
    ]


def status_rows(report: Report, grouping: str) -> list[ShareRow]:
    scheduled = parse_amount(report.totals.get("scheduled_pickups"))
    return [
        ShareRow(name, int(count), (count / scheduled * 100) if scheduled else 0.0)
        for name, count in report.grouping(grouping).items()
    ]


def payment_rows(report: Report, grouping: str) -> list[ShareRow]:
    # Proportional estimate: share of the record count times total revenue,
    # not the sum of each status's own costs.
    collection_count = len(report.collections)
    total_revenue = parse_amount(report.totals.get("total_revenue"))
    return [
        ShareRow(name, int(count), (count / collection_count * total_revenue) if collection_count else 0.0)
        for name, count in report.grouping(grouping).items()
    ]
