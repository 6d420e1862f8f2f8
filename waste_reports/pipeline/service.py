"""Request-level wiring: gate, factory, derivers and export orchestrator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from waste_reports.common.config_loader import ConfigBundle
from waste_reports.common.constants import DEFAULT_BRAND_NAME
from waste_reports.common.errors import AuthorizationError, StoreUnavailable, UnsupportedReportType
from waste_reports.common.logging import default_logger
from waste_reports.common.models import AuthorizedUser, ChartPoint, Kpi, Report, ReportFilters, ReportType, Session
from waste_reports.formatters.document import DocumentFormatter
from waste_reports.formatters.tabular import TabularFormatter
from waste_reports.formatters.text import TextFormatter
from waste_reports.pipeline.aggregate import Aggregator
from waste_reports.pipeline.authorize import AuthorizationGate
from waste_reports.pipeline.charts import derive_chart_series, series_to_dict
from waste_reports.pipeline.export import (
    ERROR_TITLE,
    ExportFormat,
    ExportOrchestrator,
    ExportOutcome,
    Notifier,
    PrintFacility,
    ShareFacility,
)
from waste_reports.pipeline.factory import ReportFactory
from waste_reports.pipeline.kpis import derive_kpis
from waste_reports.pipeline.overview import build_overview
from waste_reports.store.gateway import RecordStoreGateway

ACCESS_DENIED_TITLE = "Access Denied"
NOTICE_TITLE = "Notice"


@dataclass(frozen=True)
class ReportView:
    report: Report
    kpis: list[Kpi]
    charts: dict[str, list[ChartPoint]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": self.report.to_dict(),
            "kpis": [kpi.to_dict() for kpi in self.kpis],
            "charts": series_to_dict(self.charts),
        }


class ReportingService:
    def __init__(
        self,
        *,
        gateway: RecordStoreGateway,
        gate: AuthorizationGate,
        factory: ReportFactory,
        orchestrator: ExportOrchestrator,
        notifier: Notifier,
        logger: logging.Logger | None = None,
    ) -> None:
        self.gateway = gateway
        self.gate = gate
        self.factory = factory
        self.orchestrator = orchestrator
        self.notifier = notifier
        self.logger = logger or default_logger()

    async def authorize(self, session: Session | None) -> AuthorizedUser:
        try:
            return await asyncio.to_thread(self.gate.authorize, session)
        except AuthorizationError as exc:
            self.notifier.alert(ACCESS_DENIED_TITLE, exc.user_message)
            raise
        except StoreUnavailable as exc:
            self.notifier.alert(ERROR_TITLE, AuthorizationError.user_message)
            raise AuthorizationError(f"Account lookup failed: {exc}") from exc

    async def view(
        self,
        session: Session | None,
        report_type: ReportType | str,
        filters: ReportFilters | None = None,
    ) -> ReportView:
        """Authorize, build the report and derive its KPIs and chart series.

        Access failures and unsupported report types notify once and
        re-raise. A report built from incomplete data is returned with a
        single non-fatal notice.
        """
        await self.authorize(session)
        try:
            report_type = ReportType.parse(report_type)
        except UnsupportedReportType as exc:
            self.notifier.alert(ERROR_TITLE, exc.user_message)
            raise
        report = await self.factory.create_report(report_type, filters)
        if not report.is_complete:
            self.notifier.alert(NOTICE_TITLE, StoreUnavailable.user_message)
        return ReportView(
            report=report,
            kpis=derive_kpis(report_type, report),
            charts=derive_chart_series(report_type, report),
        )

    async def export(
        self,
        session: Session | None,
        export_format: ExportFormat | str,
        report_type: ReportType | str,
        filters: ReportFilters | None = None,
        title: str | None = None,
    ) -> tuple[ReportView, ExportOutcome]:
        export_format = ExportFormat.parse(export_format)
        view = await self.view(session, report_type, filters)
        outcome = self.orchestrator.export_as(export_format, view.report, view.report.report_type, filters, title)
        return view, outcome

    async def overview(self, session: Session | None) -> dict:
        await self.authorize(session)
        summary = await build_overview(self.gateway, self.logger)
        if summary["failed_sources"]:
            self.notifier.alert(NOTICE_TITLE, StoreUnavailable.user_message)
        return summary


def build_reporting_service(
    bundle: ConfigBundle,
    gateway: RecordStoreGateway,
    *,
    printer: PrintFacility,
    share: ShareFacility,
    notifier: Notifier,
    logger: logging.Logger | None = None,
) -> ReportingService:
    logger = logger or default_logger()
    brand_name = bundle.export.get("brand_name", DEFAULT_BRAND_NAME)
    orchestrator = ExportOrchestrator(
        tabular=TabularFormatter(),
        document=DocumentFormatter(brand_name=brand_name),
        text=TextFormatter(brand_name=brand_name),
        printer=printer,
        share=share,
        notifier=notifier,
        logger=logger,
    )
    return ReportingService(
        gateway=gateway,
        gate=AuthorizationGate(gateway.fetch_user_by_id, bundle.access, logger),
        factory=ReportFactory(gateway, Aggregator(), logger),
        orchestrator=orchestrator,
        notifier=notifier,
        logger=logger,
    )
