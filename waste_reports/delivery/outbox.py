"""Filesystem-backed print, share and notify facilities for command-line runs."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from waste_reports.common.fs import ensure_dir, slugify, write_text
from waste_reports.common.ids import generate_request_id
from waste_reports.common.logging import default_logger, log_event
from waste_reports.pipeline.export import DOCUMENT_MIME_TYPE, PrintedDocument

_EXTENSIONS = {DOCUMENT_MIME_TYPE: ".pdf", "text/html": ".html"}


class HtmlFilePrinter:
    """Writes the rendered document to ``print_dir``.

    No rasteriser is involved: the file holds the print-ready HTML and is
    tagged with the document MIME type so share targets treat it as the
    exported report.
    """

    def __init__(self, print_dir: Path) -> None:
        self.print_dir = Path(print_dir)

    def print_to_file(self, html: str) -> PrintedDocument:
        path = self.print_dir / f"{generate_request_id()}.html"
        write_text(path, html)
        return PrintedDocument(path=str(path), mime_type=DOCUMENT_MIME_TYPE)


class OutboxShareFacility:
    def __init__(self, outbox_dir: Path, logger: logging.Logger | None = None) -> None:
        self.outbox_dir = Path(outbox_dir)
        self.logger = logger or default_logger()
        self.shared: list[Path] = []

    def is_available(self) -> bool:
        try:
            ensure_dir(self.outbox_dir)
        except OSError:
            return False
        return True

    def share_file(self, path: str, mime_type: str, dialog_title: str) -> None:
        source = Path(path)
        ensure_dir(self.outbox_dir)
        target = self.outbox_dir / f"{slugify(dialog_title)}{source.suffix or _EXTENSIONS.get(mime_type, '')}"
        shutil.copyfile(source, target)
        self.shared.append(target)
        log_event(self.logger, f"shared {target.name} ({mime_type})", stage="share", event="SHARE_FILE", status="ok")

    def share_text(self, message: str, title: str) -> None:
        target = self.outbox_dir / f"{slugify(title)}.txt"
        write_text(target, message)
        self.shared.append(target)
        log_event(self.logger, f"shared {target.name}", stage="share", event="SHARE_TEXT", status="ok")


@dataclass(frozen=True)
class Notification:
    title: str
    message: str


class LoggingNotifier:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or default_logger()
        self.notifications: list[Notification] = []

    def alert(self, title: str, message: str) -> None:
        self.notifications.append(Notification(title, message))
        log_event(self.logger, f"{title}: {message}", stage="notify", event="NOTIFY", status="ok")
