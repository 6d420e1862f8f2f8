"""Export orchestration: render, print, share, and the text fallback chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from waste_reports.common.errors import ExportFailed
from waste_reports.common.logging import default_logger, log_event
from waste_reports.common.models import Report, ReportFilters, ReportType
from waste_reports.formatters.document import DocumentFormatter
from waste_reports.formatters.tabular import TabularFormatter
from waste_reports.formatters.text import TextFormatter

DOCUMENT_MIME_TYPE = "application/pdf"
TABULAR_DIALOG_TITLE = "Export Report Data (CSV)"

ERROR_TITLE = "Error"
NOTICE_TITLE = "Export"
NO_REPORT_MESSAGE = "No report data available to export"
TABULAR_FAILED_MESSAGE = "Failed to export CSV"
FALLBACK_NOTICE = "The formatted document could not be shared, so the report was shared as text instead."


class ExportFormat(str, Enum):
    DOCUMENT = "document"
    TABULAR = "tabular"

    @classmethod
    def parse(cls, value: "ExportFormat | str") -> "ExportFormat":
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower()
        normalised = _FORMAT_ALIASES.get(normalised, normalised)
        try:
            return cls(normalised)
        except ValueError as exc:
            raise ExportFailed(f"Unsupported export format: {value}") from exc


_FORMAT_ALIASES = {"pdf": ExportFormat.DOCUMENT.value, "csv": ExportFormat.TABULAR.value}


class ExportOutcome(str, Enum):
    DOCUMENT_SHARED = "document_shared"
    TEXT_FALLBACK = "text_fallback"
    TABULAR_SHARED = "tabular_shared"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self is not ExportOutcome.FAILED


@dataclass(frozen=True)
class PrintedDocument:
    path: str
    mime_type: str = DOCUMENT_MIME_TYPE


class PrintFacility(Protocol):
    def print_to_file(self, html: str) -> PrintedDocument:
        ...


class ShareFacility(Protocol):
    def is_available(self) -> bool:
        ...

    def share_file(self, path: str, mime_type: str, dialog_title: str) -> None:
        ...

    def share_text(self, message: str, title: str) -> None:
        ...


class Notifier(Protocol):
    def alert(self, title: str, message: str) -> None:
        ...


class ExportOrchestrator:
    """Hands rendered reports to the print/share facilities.

    Document exports try print-then-share first and fall back once to a
    plain-text share. Every export path ends in at most one notification.
    """

    def __init__(
        self,
        *,
        tabular: TabularFormatter,
        document: DocumentFormatter,
        text: TextFormatter,
        printer: PrintFacility,
        share: ShareFacility,
        notifier: Notifier,
        logger: logging.Logger | None = None,
    ) -> None:
        self.tabular = tabular
        self.document = document
        self.text = text
        self.printer = printer
        self.share = share
        self.notifier = notifier
        self.logger = logger or default_logger()

    def _log(self, message: str, report_type: ReportType, event: str, status: str, **fields) -> None:
        level = logging.INFO if status == "ok" else logging.WARNING
        log_event(
            self.logger,
            message,
            level=level,
            stage="export",
            report_type=report_type.value,
            event=event,
            status=status,
            **fields,
        )

    def _export_document(
        self,
        report: Report,
        report_type: ReportType,
        filters: ReportFilters,
        title: str,
    ) -> ExportOutcome:
        try:
            if not self.share.is_available():
                raise ExportFailed("share facility unavailable")
            html = self.document.render(report, report_type, filters, title)
            printed = self.printer.print_to_file(html)
            self.share.share_file(printed.path, printed.mime_type, f"{title} - Report")
        except Exception as exc:
            self._log(
                f"document export failed, falling back to text: {exc}",
                report_type,
                "EXPORT_FALLBACK",
                "partial",
                error_code=getattr(exc, "error_code", ExportFailed.error_code),
            )
        else:
            self._log("document shared", report_type, "EXPORT_OK", "ok")
            return ExportOutcome.DOCUMENT_SHARED

        try:
            message = self.text.render(report, report_type, filters, title)
            self.share.share_text(message, f"{title} - Report Data")
        except Exception as exc:
            self._log(
                f"text fallback failed: {exc}",
                report_type,
                "EXPORT_FAIL",
                "error",
                error_code=ExportFailed.error_code,
            )
            self.notifier.alert(ERROR_TITLE, ExportFailed.user_message)
            return ExportOutcome.FAILED

        self.notifier.alert(NOTICE_TITLE, FALLBACK_NOTICE)
        return ExportOutcome.TEXT_FALLBACK

    def _export_tabular(self, report: Report, report_type: ReportType, filters: ReportFilters) -> ExportOutcome:
        try:
            content = self.tabular.render(report, report_type, filters)
            self.share.share_text(content, TABULAR_DIALOG_TITLE)
        except Exception as exc:
            self._log(
                f"tabular export failed: {exc}",
                report_type,
                "EXPORT_FAIL",
                "error",
                error_code=ExportFailed.error_code,
            )
            self.notifier.alert(ERROR_TITLE, TABULAR_FAILED_MESSAGE)
            return ExportOutcome.FAILED
        self._log("tabular export shared", report_type, "EXPORT_OK", "ok", rows_out=content.count("\n"))
        return ExportOutcome.TABULAR_SHARED

    def export_as(
        self,
        export_format: ExportFormat | str,
        report: Report | None,
        report_type: ReportType | str,
        filters: ReportFilters | None = None,
        title: str | None = None,
    ) -> ExportOutcome:
        """Export ``report`` in ``export_format`` and report how it went.

        Failures never raise; they end in ExportOutcome.FAILED after exactly
        one error notification. An unknown format or report type raises
        before anything is rendered.
        """
        export_format = ExportFormat.parse(export_format)
        report_type = ReportType.parse(report_type)
        filters = filters or ReportFilters()

        if report is None:
            self._log("no report to export", report_type, "EXPORT_FAIL", "error", error_code=ExportFailed.error_code)
            self.notifier.alert(ERROR_TITLE, NO_REPORT_MESSAGE)
            return ExportOutcome.FAILED

        if export_format is ExportFormat.DOCUMENT:
            return self._export_document(report, report_type, filters, title or report_type.export_title)
        return self._export_tabular(report, report_type, filters)
