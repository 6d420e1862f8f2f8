"""Plain-text summary for lightweight share channels."""

from __future__ import annotations

from datetime import date
from typing import Callable

from waste_reports.common.constants import DEFAULT_BRAND_NAME
from waste_reports.common.models import Report, ReportFilters, ReportType
from waste_reports.common.time_utils import utc_today
from waste_reports.formatters.rows import date_range_label, generated_on_label, status_rows, weight_rows
from waste_reports.pipeline.aggregate import BY_AREA, BY_WASTE_TYPE, PAYMENT_STATUS, STATUS_BREAKDOWN
from waste_reports.pipeline.kpis import derive_kpis

BULLET = "•"


class TextFormatter:
    def __init__(self, brand_name: str = DEFAULT_BRAND_NAME, clock: Callable[[], date] = utc_today) -> None:
        self.brand_name = brand_name
        self.clock = clock

    def _group_sections(self, report: Report, report_type: ReportType) -> list[str]:
        lines: list[str] = []
        if report_type is ReportType.WASTE_GENERATION:
            for heading, grouping in (("Waste Generation by Area:", BY_AREA), ("Waste Generation by Type:", BY_WASTE_TYPE)):
                lines.append(heading)
                lines.extend(
                    f"{BULLET} {row.name}: {row.count} collections, {row.weight:.1f} kg"
                    for row in weight_rows(report, grouping)
                )
        elif report_type is ReportType.COLLECTION_EFFICIENCY:
            lines.append("Collection Status:")
            lines.extend(f"{BULLET} {row.name}: {row.count} pickups" for row in status_rows(report, STATUS_BREAKDOWN))
        elif report_type is ReportType.COST_ANALYSIS:
            lines.append("Payment Status:")
            lines.extend(
                f"{BULLET} {name}: {count} payments" for name, count in report.grouping(PAYMENT_STATUS).items()
            )
        return lines

    def render(
        self,
        report: Report,
        report_type: ReportType | str,
        filters: ReportFilters | None = None,
        title: str | None = None,
        *,
        generated_on: date | None = None,
    ) -> str:
        report_type = ReportType.parse(report_type)
        today = generated_on_label(generated_on or self.clock())

        lines = [
            title or report_type.export_title,
            f"Generated on: {today}",
            f"Date Range: {date_range_label(filters)}",
            "",
            "Key Performance Indicators:",
        ]
        lines.extend(f"{BULLET} {kpi.label}: {kpi.value}" for kpi in derive_kpis(report_type, report))
        lines.append("")
        lines.extend(self._group_sections(report, report_type))

        body = "\n".join(lines)
        return f"{body}\n\n---\n{self.brand_name}\nReport Generated on {today}"
