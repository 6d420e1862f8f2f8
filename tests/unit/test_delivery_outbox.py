from pathlib import Path

from waste_reports.delivery.outbox import HtmlFilePrinter, LoggingNotifier, Notification, OutboxShareFacility


def test_printer_writes_html_with_document_mime_type(tmp_path: Path):
    printed = HtmlFilePrinter(tmp_path / "printed").print_to_file("<html>ok</html>")

    assert printed.mime_type == "application/pdf"
    assert Path(printed.path).read_text(encoding="utf-8") == "<html>ok</html>"


def test_outbox_shares_files_and_text(tmp_path: Path):
    source = tmp_path / "doc.html"
    source.write_text("<html></html>", encoding="utf-8")
    share = OutboxShareFacility(tmp_path / "outbox")

    assert share.is_available()
    share.share_file(str(source), "application/pdf", "Cost Analysis Report - Report")
    share.share_text("hello", "Export Report Data (CSV)")

    assert [path.name for path in share.shared] == [
        "cost-analysis-report-report.html",
        "export-report-data-csv.txt",
    ]
    assert (tmp_path / "outbox" / "export-report-data-csv.txt").read_text(encoding="utf-8") == "hello"


def test_outbox_unavailable_when_directory_cannot_be_created(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    assert OutboxShareFacility(blocker / "outbox").is_available() is False


def test_notifier_keeps_notifications():
    notifier = LoggingNotifier()
    notifier.alert("Error", "Failed to export CSV")
    assert notifier.notifications == [Notification("Error", "Failed to export CSV")]
