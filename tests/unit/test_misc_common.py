import json
import logging
from pathlib import Path

import pytest

from waste_reports.common.errors import UnsupportedReportType
from waste_reports.common.fs import read_json, slugify, write_json
from waste_reports.common.ids import generate_request_id
from waste_reports.common.logging import build_logger, log_event
from waste_reports.common.models import (
    CollectionRecord,
    DateRange,
    Report,
    ReportFilters,
    ReportType,
    WrappedTimestamp,
)


def test_generate_request_id_prefix():
    assert generate_request_id().startswith("req-")


def test_slugify_dialog_titles():
    assert slugify("Cost Analysis Report - Report Data") == "cost-analysis-report-report-data"
    assert slugify("???") == "report"


def test_write_json_is_sorted_and_round_trips(tmp_path: Path):
    path = tmp_path / "nested" / "payload.json"
    write_json(path, {"b": 1, "a": [1, 2]})
    assert read_json(path) == {"a": [1, 2], "b": 1}
    assert path.read_text(encoding="utf-8").index('"a"') < path.read_text(encoding="utf-8").index('"b"')


def test_report_filters_from_camel_or_snake_case():
    camel = ReportFilters.from_dict({"dateRange": {"startDate": "2024-01-01", "endDate": "2024-01-31"}, "wasteType": "Organic"})
    snake = ReportFilters.from_dict({"date_range": {"start_date": "2024-01-01", "end_date": "2024-01-31"}, "waste_type": "Organic"})
    assert camel == snake
    assert camel.date_range == DateRange("2024-01-01", "2024-01-31")
    assert ReportFilters.from_dict(None) == ReportFilters()


def test_collection_record_reads_store_field_names():
    record = CollectionRecord.from_document(
        "c1",
        {"address": "1 A St, North", "wasteType": "Organic", "totalWeight": "3", "createdAt": {"_seconds": 10, "_nanoseconds": 5000}},
    )
    assert record.waste_type == "Organic"
    assert record.total_weight == "3"
    assert record.created_at == WrappedTimestamp(10, 5000)


def test_report_type_catalog_and_parse():
    assert ReportType.parse("cost-analysis") is ReportType.COST_ANALYSIS
    assert ReportType.WASTE_GENERATION.dashboard_title == "Total waste collected"
    assert ReportType.COLLECTION_EFFICIENCY.export_title == "Schedules vs collected Report"
    with pytest.raises(UnsupportedReportType):
        ReportType.parse("recycling-stats")


def test_report_completeness_follows_failed_sources():
    report = Report(ReportType.COST_ANALYSIS, totals={}, groupings={})
    assert report.is_complete
    degraded = Report(ReportType.COST_ANALYSIS, totals={}, groupings={}, failed_sources=("collections",))
    assert not degraded.is_complete
    assert degraded.to_dict()["failed_sources"] == ["collections"]


def test_build_logger_writes_json_lines_with_request_id(tmp_path: Path):
    logger = build_logger("req-test", log_dir=tmp_path, level="INFO")
    log_event(logger, "hello", stage="fetch", source="collections", event="FETCH_OK", status="ok", rows_out=3)
    log_event(logger, "quiet", level=logging.DEBUG, stage="fetch")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "req-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["request_id"] == "req-test"
    assert payload["event"] == "FETCH_OK"
    assert payload["rows_out"] == 3
    assert payload["error_code"] is None


def test_rebuilding_logger_closes_previous_file_handler(tmp_path: Path):
    first = build_logger("req-reused", log_dir=tmp_path)
    old_file_handlers = [handler for handler in first.handlers if isinstance(handler, logging.FileHandler)]
    assert old_file_handlers and old_file_handlers[0].stream is not None

    second = build_logger("req-reused", log_dir=tmp_path)

    assert second is first
    assert old_file_handlers[0].stream is None
    assert old_file_handlers[0] not in second.handlers
    assert sum(isinstance(handler, logging.FileHandler) for handler in second.handlers) == 1
