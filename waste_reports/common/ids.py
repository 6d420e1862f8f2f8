"""Request identifier helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def generate_request_id() -> str:
    now = datetime.now(tz=timezone.utc)
    # Sortable id without external dependency.
    return now.strftime("req-%Y%m%dT%H%M%S%fZ")
