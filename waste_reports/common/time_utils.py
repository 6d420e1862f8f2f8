"""UTC-focused helpers for timestamps, range bounds and display dates."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from waste_reports.common.models import Instant, WrappedTimestamp


def utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def parse_iso_date(value: str | None) -> str | None:
    if not value:
        return None
    return date.fromisoformat(value).isoformat()


def _as_utc(moment: datetime) -> datetime:
    # Naive values are read as UTC, matching how bare ISO dates are interpreted.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _parse_iso(value: str) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def normalise_instant(value: Instant | datetime | date | None) -> datetime | None:
    """Resolve either timestamp representation to an aware UTC datetime.

    Returns None when the value cannot be interpreted, so callers can treat
    the record as out of range instead of failing.
    """
    if isinstance(value, WrappedTimestamp):
        try:
            moment = value.to_datetime()
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        moment = _parse_iso(value)
    else:
        return None
    if moment is None:
        return None
    return _as_utc(moment)


def display_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"
