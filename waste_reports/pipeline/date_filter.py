"""Date-window narrowing of record sets."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence, TypeVar

from waste_reports.common.models import DateRange
from waste_reports.common.time_utils import normalise_instant

R = TypeVar("R")


def _within(record, start: datetime, end: datetime) -> bool:
    moment = normalise_instant(getattr(record, "created_at", None))
    if moment is None:
        return False
    return start <= moment <= end


def filter_by_date_range(records: Sequence[R], date_range: DateRange | None) -> Sequence[R]:
    """Keep records created inside ``date_range``, both bounds inclusive.

    With no range (or a range missing either bound) the input sequence is
    returned as-is. Records whose timestamp cannot be read are dropped, and an
    unreadable bound matches nothing.
    """
    if date_range is None or not date_range.start_date or not date_range.end_date:
        return records

    start = normalise_instant(date_range.start_date)
    end = normalise_instant(date_range.end_date)
    if start is None or end is None:
        return []
    return [record for record in records if _within(record, start, end)]
