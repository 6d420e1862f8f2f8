"""Headline metrics for each report type."""

from __future__ import annotations

from typing import Any, Mapping

from waste_reports.common.models import Kpi, Report, ReportType
from waste_reports.pipeline.aggregate import lookup, parse_amount


def _totals(report: Report | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if isinstance(report, Report):
        return report.totals
    return report or {}


def _amount(totals: Mapping[str, Any], key: str) -> float:
    number = parse_amount(lookup(totals, key))
    return number if number != 0 else 0.0


def format_weight(value: float) -> str:
    return f"{value:.1f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_currency(value: float) -> str:
    return f"${value:.2f}"


def format_count(totals: Mapping[str, Any], key: str) -> int:
    value = lookup(totals, key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(parse_amount(value))


def derive_kpis(report_type: ReportType | str, report: Report | Mapping[str, Any] | None) -> list[Kpi]:
    """Return the three headline KPIs for ``report_type`` in display order.

    ``report`` may be a Report or a bare totals mapping; missing totals read
    as zero.
    """
    report_type = ReportType.parse(report_type)
    totals = _totals(report)

    if report_type is ReportType.WASTE_GENERATION:
        return [
            Kpi("Total Weight (kg)", format_weight(_amount(totals, "total_weight")), "BarChart3", "#10B981"),
            Kpi("Total Collections", format_count(totals, "total_collections"), "Calendar", "#3B82F6"),
            Kpi("Average Weight (kg)", format_weight(_amount(totals, "average_weight")), "TrendingUp", "#F59E0B"),
        ]
    if report_type is ReportType.COLLECTION_EFFICIENCY:
        return [
            Kpi("Efficiency Rate", format_percent(_amount(totals, "efficiency_rate")), "TrendingUp", "#10B981"),
            Kpi("Scheduled Pickups", format_count(totals, "scheduled_pickups"), "Calendar", "#3B82F6"),
            Kpi("Completed Pickups", format_count(totals, "completed_pickups"), "BarChart3", "#F59E0B"),
        ]
    if report_type is ReportType.COST_ANALYSIS:
        return [
            Kpi("Total Revenue", format_currency(_amount(totals, "total_revenue")), "DollarSign", "#10B981"),
            Kpi("Average Cost", format_currency(_amount(totals, "average_cost")), "TrendingUp", "#3B82F6"),
            Kpi("Paid Revenue", format_currency(_amount(totals, "paid_revenue")), "DollarSign", "#F59E0B"),
        ]
    raise AssertionError(f"Unhandled report type: {report_type}")
