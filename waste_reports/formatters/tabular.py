"""Comma-separated export: header plus one row per aggregation group."""

from __future__ import annotations

import csv
import io

from waste_reports.common.constants import TABULAR_ALL_WASTE_TYPES
from waste_reports.common.models import Report, ReportFilters, ReportType
from waste_reports.formatters.rows import payment_rows, status_rows, weight_rows
from waste_reports.pipeline.aggregate import BY_AREA, PAYMENT_STATUS, STATUS_BREAKDOWN

HEADERS: dict[ReportType, list[str]] = {
    ReportType.WASTE_GENERATION: ["Area", "Waste Type", "Collections", "Total Weight (kg)", "Average Weight (kg)"],
    ReportType.COLLECTION_EFFICIENCY: ["Status", "Count", "Percentage"],
    ReportType.COST_ANALYSIS: ["Payment Status", "Count", "Revenue ($)"],
}


class TabularFormatter:
    def rows(self, report: Report, report_type: ReportType) -> list[list[str | int]]:
        if report_type is ReportType.WASTE_GENERATION:
            return [
                [row.name, TABULAR_ALL_WASTE_TYPES, row.count, f"{row.weight:.1f}", f"{row.average:.1f}"]
                for row in weight_rows(report, BY_AREA)
            ]
        if report_type is ReportType.COLLECTION_EFFICIENCY:
            return [[row.name, row.count, f"{row.share:.1f}"] for row in status_rows(report, STATUS_BREAKDOWN)]
        if report_type is ReportType.COST_ANALYSIS:
            return [[row.name, row.count, f"{row.share:.2f}"] for row in payment_rows(report, PAYMENT_STATUS)]
        raise AssertionError(f"Unhandled report type: {report_type}")

    def render(
        self,
        report: Report,
        report_type: ReportType | str,
        filters: ReportFilters | None = None,
        title: str | None = None,
    ) -> str:
        """Render ``report`` as CSV text.

        Every line ends in ``\\n``; with no groups the output is the header
        line followed by an empty line. ``filters`` and ``title`` do not
        affect the columns.
        """
        report_type = ReportType.parse(report_type)
        rows = self.rows(report, report_type)
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(HEADERS[report_type])
        writer.writerows(rows)
        if not rows:
            buffer.write("\n")
        return buffer.getvalue()
