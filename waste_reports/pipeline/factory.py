"""Report construction: fetch the record sets a report type needs, then aggregate."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from typing import Callable, TypeVar

from waste_reports.common.constants import COLLECTIONS_SOURCE, SCHEDULES_SOURCE
from waste_reports.common.errors import StoreUnavailable
from waste_reports.common.logging import default_logger, log_event
from waste_reports.common.models import Report, ReportFilters, ReportType
from waste_reports.pipeline.aggregate import Aggregator
from waste_reports.store.gateway import RecordStoreGateway

T = TypeVar("T")


class ReportFactory:
    def __init__(
        self,
        gateway: RecordStoreGateway,
        aggregator: Aggregator,
        logger: logging.Logger | None = None,
    ) -> None:
        self.gateway = gateway
        self.aggregator = aggregator
        self.logger = logger or default_logger()

    async def _fetch(self, source: str, fetcher: Callable[[], list[T]], failures: list[str]) -> list[T]:
        started = time.monotonic()
        try:
            records = await asyncio.to_thread(fetcher)
        except StoreUnavailable as exc:
            failures.append(source)
            log_event(
                self.logger,
                f"record set {source} unavailable: {exc}",
                level=logging.WARNING,
                stage="fetch",
                source=source,
                event="FETCH_FAIL",
                status="error",
                error_code=exc.error_code,
                duration_ms=int((time.monotonic() - started) * 1000),
            )
            return []
        log_event(
            self.logger,
            f"record set {source} fetched",
            stage="fetch",
            source=source,
            event="FETCH_OK",
            status="ok",
            rows_out=len(records),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return records

    async def create_report(self, report_type: ReportType | str, filters: ReportFilters | None = None) -> Report:
        """Build a fresh Report for ``report_type``.

        Raises UnsupportedReportType for anything outside the catalog. A record
        set the store cannot serve is replaced by an empty one and named in
        ``Report.failed_sources``; store failures never escape this method.
        """
        report_type = ReportType.parse(report_type)
        filters = filters or ReportFilters()
        failures: list[str] = []

        if report_type is ReportType.WASTE_GENERATION or report_type is ReportType.COLLECTION_EFFICIENCY:
            collections, schedules = await asyncio.gather(
                self._fetch(COLLECTIONS_SOURCE, self.gateway.fetch_collections, failures),
                self._fetch(SCHEDULES_SOURCE, self.gateway.fetch_schedules, failures),
            )
            if report_type is ReportType.WASTE_GENERATION:
                report = self.aggregator.waste_generation(collections, schedules, filters)
            else:
                report = self.aggregator.collection_efficiency(collections, schedules, filters)
        elif report_type is ReportType.COST_ANALYSIS:
            collections = await self._fetch(COLLECTIONS_SOURCE, self.gateway.fetch_collections, failures)
            report = self.aggregator.cost_analysis(collections, filters)
        else:
            raise AssertionError(f"Unhandled report type: {report_type}")

        if failures:
            report = dataclasses.replace(report, failed_sources=tuple(sorted(failures)))

        log_event(
            self.logger,
            "report built",
            stage="report",
            report_type=report_type.value,
            event="REPORT_BUILT",
            status="ok" if report.is_complete else "partial",
            rows_in=len(report.collections) + len(report.schedules),
        )
        return report
