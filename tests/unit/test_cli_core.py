import json

import pytest

from waste_reports.cli import build_filters, main, parse_args
from waste_reports.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS
from waste_reports.common.errors import ReportingError


def test_parse_args_defaults(monkeypatch):
    monkeypatch.delenv("WASTE_REPORTS_ID_TOKEN", raising=False)
    args = parse_args(["report", "--report-type", "waste-generation"])
    assert args.command == "report"
    assert args.report_type == "waste-generation"
    assert args.export_format == "document"
    assert args.overlay_config_dir is None
    assert args.snapshot is None
    assert args.id_token is None


def test_parse_args_accepts_format_aliases():
    assert parse_args(["export", "--format", "csv"]).export_format == "csv"
    assert parse_args(["export", "--format", "pdf"]).export_format == "pdf"


def test_parse_args_rejects_unknown_report_type():
    with pytest.raises(SystemExit):
        parse_args(["report", "--report-type", "user-analytics"])


def test_parse_args_reads_id_token_from_environment(monkeypatch):
    monkeypatch.setenv("WASTE_REPORTS_ID_TOKEN", "env-token")
    assert parse_args(["overview"]).id_token == "env-token"


def test_build_filters_from_args():
    filters = build_filters(
        parse_args(["report", "--start-date", "2024-01-01", "--end-date", "2024-01-31", "--area", "North"])
    )
    assert filters.date_range.start_date == "2024-01-01"
    assert filters.date_range.end_date == "2024-01-31"
    assert filters.area == "North"
    assert filters.waste_type is None
    assert build_filters(parse_args(["report"])).date_range is None


def test_build_filters_rejects_malformed_dates():
    with pytest.raises(ReportingError):
        build_filters(parse_args(["report", "--start-date", "01/02/2024", "--end-date", "2024-01-31"]))


def test_catalog_command_prints_all_report_types(capsys):
    assert main(["catalog"]) == EXIT_SUCCESS
    catalog = json.loads(capsys.readouterr().out)
    assert [entry["id"] for entry in catalog] == ["waste-generation", "collection-efficiency", "cost-analysis"]
    assert catalog[2]["export_title"] == "Cost Analysis Report"


def test_report_without_report_type_is_hard_failure(tmp_path):
    code = main(
        [
            "report",
            "--snapshot",
            "tests/fixtures/store_snapshot.json",
            "--uid",
            "admin-1",
            "--out-dir",
            str(tmp_path),
        ]
    )
    assert code == EXIT_HARD_FAIL
