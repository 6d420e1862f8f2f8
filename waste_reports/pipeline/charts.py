"""Chart-ready series derived from report groupings."""

from __future__ import annotations

from typing import Any, Mapping

from waste_reports.common.constants import (
    FALLBACK_COLOR,
    PAYMENT_STATUS_COLORS,
    SCHEDULE_STATUS_COLORS,
    WASTE_TYPE_COLORS,
)
from waste_reports.common.models import ChartPoint, Report, ReportType
from waste_reports.pipeline.aggregate import BY_AREA, BY_WASTE_TYPE, PAYMENT_STATUS, STATUS_BREAKDOWN, lookup

PIE_CHART = "pie_chart"
BAR_CHART = "bar_chart"


def color_for(palette: Mapping[str, str], key: str) -> str:
    return palette.get(key, FALLBACK_COLOR)


def _groupings(report: Report | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if isinstance(report, Report):
        return report.groupings
    return report or {}


def _weight_series(groups: Mapping[str, Any], palette: Mapping[str, str]) -> list[ChartPoint]:
    return [ChartPoint(name, (stats or {}).get("weight", 0.0), color_for(palette, name)) for name, stats in groups.items()]


def _count_series(groups: Mapping[str, Any], palette: Mapping[str, str]) -> list[ChartPoint]:
    return [ChartPoint(name, count, color_for(palette, name)) for name, count in groups.items()]


def derive_chart_series(
    report_type: ReportType | str,
    report: Report | Mapping[str, Any] | None,
) -> dict[str, list[ChartPoint]]:
    report_type = ReportType.parse(report_type)
    groupings = _groupings(report)

    if report_type is ReportType.WASTE_GENERATION:
        return {
            PIE_CHART: _weight_series(lookup(groupings, BY_WASTE_TYPE) or {}, WASTE_TYPE_COLORS),
            # Areas have no palette of their own.
            BAR_CHART: _weight_series(lookup(groupings, BY_AREA) or {}, {}),
        }
    if report_type is ReportType.COLLECTION_EFFICIENCY:
        return {PIE_CHART: _count_series(lookup(groupings, STATUS_BREAKDOWN) or {}, SCHEDULE_STATUS_COLORS)}
    if report_type is ReportType.COST_ANALYSIS:
        return {PIE_CHART: _count_series(lookup(groupings, PAYMENT_STATUS) or {}, PAYMENT_STATUS_COLORS)}
    raise AssertionError(f"Unhandled report type: {report_type}")


def series_to_dict(series: Mapping[str, list[ChartPoint]]) -> dict[str, list[dict]]:
    return {name: [point.to_dict() for point in points] for name, points in series.items()}
