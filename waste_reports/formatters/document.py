"""Styled, self-contained HTML document for print-to-file export."""

from __future__ import annotations

from datetime import date
from typing import Callable
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from waste_reports.common.constants import DEFAULT_BRAND_NAME
from waste_reports.common.models import Report, ReportFilters, ReportType
from waste_reports.common.time_utils import utc_today
from waste_reports.formatters.rows import (
    date_range_label,
    generated_on_label,
    payment_rows,
    status_rows,
    weight_rows,
)
from waste_reports.pipeline.aggregate import BY_AREA, BY_WASTE_TYPE, PAYMENT_STATUS, STATUS_BREAKDOWN
from waste_reports.pipeline.kpis import derive_kpis

TEMPLATE_DIR = Path(__file__).parent / "templates"
REPORT_TEMPLATE = "report.html.j2"


def _build_env(template_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(enabled_extensions=("html", "j2"), default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _table(heading: str | None, columns: list[str], rows: list[list[str | int]]) -> dict:
    return {"heading": heading, "columns": columns, "rows": rows}


class DocumentFormatter:
    """Renders one report into the HTML handed to the print facility.

    The template lives beside this module; everything interpolated into it
    is autoescaped, so group names and titles cannot inject markup.
    """

    def __init__(
        self,
        brand_name: str = DEFAULT_BRAND_NAME,
        template_dir: Path = TEMPLATE_DIR,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self.brand_name = brand_name
        self.clock = clock
        self.env = _build_env(template_dir)

    def tables(self, report: Report, report_type: ReportType) -> tuple[str, list[dict]]:
        if report_type is ReportType.WASTE_GENERATION:
            weight_columns = ["Collections", "Total Weight", "Average Weight"]
            return "Detailed Data", [
                _table(
                    "Waste Generation by Area",
                    ["Area", *weight_columns],
                    [[r.name, r.count, f"{r.weight:.1f} kg", f"{r.average:.1f} kg"] for r in weight_rows(report, BY_AREA)],
                ),
                _table(
                    "Waste Generation by Type",
                    ["Waste Type", *weight_columns],
                    [
                        [r.name, r.count, f"{r.weight:.1f} kg", f"{r.average:.1f} kg"]
                        for r in weight_rows(report, BY_WASTE_TYPE)
                    ],
                ),
            ]
        if report_type is ReportType.COLLECTION_EFFICIENCY:
            return "Collection Status Breakdown", [
                _table(
                    None,
                    ["Status", "Count", "Percentage"],
                    [[r.name, r.count, f"{r.share:.1f}%"] for r in status_rows(report, STATUS_BREAKDOWN)],
                )
            ]
        if report_type is ReportType.COST_ANALYSIS:
            return "Payment Status Breakdown", [
                _table(
                    None,
                    ["Payment Status", "Count", "Revenue"],
                    [[r.name, r.count, f"${r.share:.2f}"] for r in payment_rows(report, PAYMENT_STATUS)],
                )
            ]
        raise AssertionError(f"Unhandled report type: {report_type}")

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
        section_heading, tables = self.tables(report, report_type)
        template = self.env.get_template(REPORT_TEMPLATE)
        return template.render(
            title=title or report_type.export_title,
            generated_on=generated_on_label(generated_on or self.clock()),
            date_range=date_range_label(filters),
            filters=filters or ReportFilters(),
            kpis=derive_kpis(report_type, report),
            section_heading=section_heading,
            tables=tables,
            brand_name=self.brand_name,
        )
