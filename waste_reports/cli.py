"""CLI entrypoint for waste management reports."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path

from waste_reports.common.config_loader import ConfigBundle, load_all_configs
from waste_reports.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from waste_reports.common.errors import ReportingError
from waste_reports.common.fs import write_json
from waste_reports.common.http import HttpClient
from waste_reports.common.ids import generate_request_id
from waste_reports.common.logging import build_logger, log_event
from waste_reports.common.models import REPORT_CATALOG, DateRange, ReportFilters, Session
from waste_reports.common.time_utils import parse_iso_date
from waste_reports.delivery.outbox import HtmlFilePrinter, LoggingNotifier, OutboxShareFacility
from waste_reports.pipeline.export import ExportOutcome
from waste_reports.pipeline.service import ReportingService, build_reporting_service
from waste_reports.store.firestore import FirestoreGateway
from waste_reports.store.gateway import RecordStoreGateway
from waste_reports.store.snapshot import SnapshotGateway

ID_TOKEN_ENV = "WASTE_REPORTS_ID_TOKEN"
DEFAULT_OUT_DIR = "./out"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--report-type", default=None, choices=[report_type.value for report_type in REPORT_CATALOG])
    parser.add_argument("--start-date", default=None)
    parser.add_argument("--end-date", default=None)
    parser.add_argument("--area", default=None)
    parser.add_argument("--waste-type", default=None)
    parser.add_argument(
        "--format", dest="export_format", default="document", choices=["document", "pdf", "tabular", "csv"]
    )
    parser.add_argument("--title", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--snapshot", default=None)
    parser.add_argument("--uid", default=None)
    parser.add_argument("--id-token", default=os.environ.get(ID_TOKEN_ENV))
    parser.add_argument("--out-dir", default=None)
    parser.add_argument("--request-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def build_filters(args: argparse.Namespace) -> ReportFilters:
    date_range = None
    if args.start_date or args.end_date:
        try:
            date_range = DateRange(parse_iso_date(args.start_date), parse_iso_date(args.end_date))
        except ValueError as exc:
            raise ReportingError(f"Invalid date bound: {exc}") from exc
    return ReportFilters(date_range=date_range, area=args.area, waste_type=args.waste_type)


def build_gateway(args: argparse.Namespace, bundle: ConfigBundle, stack: ExitStack) -> RecordStoreGateway:
    if args.snapshot:
        return SnapshotGateway(Path(args.snapshot), bundle.store["collections"])
    client = stack.enter_context(HttpClient.from_store_config(bundle.store, bearer_token=args.id_token))
    return FirestoreGateway(client, bundle.store)


def _require_report_type(args: argparse.Namespace) -> str:
    if not args.report_type:
        raise ReportingError(f"--report-type is required for {args.command}")
    return args.report_type


async def execute_command(
    args: argparse.Namespace,
    service: ReportingService,
    out_dir: Path,
    logger: logging.Logger,
) -> int:
    session = Session(uid=args.uid, id_token=args.id_token) if args.uid else None

    if args.command == "overview":
        summary = await service.overview(session)
        write_json(out_dir / "reports" / "overview.json", summary)
        return EXIT_PARTIAL if summary["failed_sources"] else EXIT_SUCCESS

    if args.command == "report":
        report_type = _require_report_type(args)
        view = await service.view(session, report_type, build_filters(args))
        write_json(out_dir / "reports" / f"{report_type}.json", view.to_dict())
        return EXIT_SUCCESS if view.report.is_complete else EXIT_PARTIAL

    if args.command == "export":
        report_type = _require_report_type(args)
        view, outcome = await service.export(session, args.export_format, report_type, build_filters(args), args.title)
        log_event(
            logger,
            f"export finished: {outcome.value}",
            stage="export",
            report_type=report_type,
            event="EXPORT_END",
            status="ok" if outcome.succeeded else "error",
        )
        if outcome is ExportOutcome.FAILED:
            return EXIT_HARD_FAIL
        if outcome is ExportOutcome.TEXT_FALLBACK or not view.report.is_complete:
            return EXIT_PARTIAL
        return EXIT_SUCCESS

    raise ValueError(f"Unknown command: {args.command}")


def print_catalog() -> None:
    catalog = [
        {
            "id": report_type.value,
            "title": report_type.dashboard_title,
            "description": report_type.description,
            "export_title": report_type.export_title,
        }
        for report_type in REPORT_CATALOG
    ]
    print(json.dumps(catalog, indent=2))


def run_command(args: argparse.Namespace) -> int:
    if args.command == "catalog":
        print_catalog()
        return EXIT_SUCCESS

    request_id = args.request_id or generate_request_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    out_dir = Path(args.out_dir or DEFAULT_OUT_DIR)

    logger = build_logger(request_id, log_dir=out_dir / "logs", level=args.log_level)
    bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)

    outbox_dir = out_dir / "shared" if args.out_dir else Path(bundle.export["outbox_dir"])
    print_dir = out_dir / "printed" if args.out_dir else Path(bundle.export["print_dir"])

    log_event(logger, "command start", stage=args.command, event="COMMAND_START", status="ok")
    with ExitStack() as stack:
        gateway = build_gateway(args, bundle, stack)
        service = build_reporting_service(
            bundle,
            gateway,
            printer=HtmlFilePrinter(print_dir),
            share=OutboxShareFacility(outbox_dir, logger),
            notifier=LoggingNotifier(logger),
            logger=logger,
        )
        try:
            code = asyncio.run(execute_command(args, service, out_dir, logger))
        except ReportingError as exc:
            log_event(
                logger,
                f"command failed: {exc}",
                level=logging.ERROR,
                stage=args.command,
                event="COMMAND_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return EXIT_HARD_FAIL
    log_event(logger, "command end", stage=args.command, event="COMMAND_END", status="ok")
    return code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except ReportingError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
