"""Grouping and metric aggregation over filtered record sets."""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping, Sequence

from waste_reports.common.constants import (
    COMPLETED_STATUS,
    DEFAULT_WASTE_TYPE,
    PAYMENT_STATUSES,
    SCHEDULE_STATUSES,
    UNKNOWN_AREA,
)
from waste_reports.common.models import (
    CollectionRecord,
    Report,
    ReportFilters,
    ReportType,
    ScheduleRecord,
)
from waste_reports.pipeline.date_filter import filter_by_date_range

BY_AREA = "by_area"
BY_WASTE_TYPE = "by_waste_type"
STATUS_BREAKDOWN = "status_breakdown"
PAYMENT_STATUS = "payment_status"

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> float:
    """Read a decimal amount the way lenient float parsing does.

    A numeric prefix is honoured ("12.5kg" -> 12.5); anything else,
    including non-finite results, counts as 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if match is None:
            return 0.0
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def area_of(address: Any) -> str:
    if not isinstance(address, str):
        return UNKNOWN_AREA
    parts = address.split(",")
    if len(parts) < 2:
        return UNKNOWN_AREA
    return parts[1].strip() or UNKNOWN_AREA


def waste_type_of(waste_type: Any) -> str:
    # Case-sensitive and untrimmed: "Plastic" and "plastic" stay separate groups.
    if not waste_type:
        return DEFAULT_WASTE_TYPE
    return str(waste_type)


def _group_weights(collections: Iterable[CollectionRecord], key_of) -> dict[str, dict[str, float | int]]:
    groups: dict[str, dict[str, float | int]] = {}
    for record in collections:
        key = key_of(record)
        bucket = groups.setdefault(key, {"count": 0, "weight": 0.0})
        bucket["count"] += 1
        bucket["weight"] += parse_amount(record.total_weight)
    return groups


def group_by_area(collections: Iterable[CollectionRecord]) -> dict[str, dict[str, float | int]]:
    return _group_weights(collections, lambda record: area_of(record.address))


def group_by_waste_type(collections: Iterable[CollectionRecord]) -> dict[str, dict[str, float | int]]:
    return _group_weights(collections, lambda record: waste_type_of(record.waste_type))


def group_by_schedule_status(schedules: Sequence[ScheduleRecord], completed_pickups: int) -> dict[str, int]:
    # Completed comes from the collection count: schedules never carry that status.
    breakdown = {COMPLETED_STATUS: completed_pickups}
    for status in SCHEDULE_STATUSES:
        breakdown[status] = sum(1 for schedule in schedules if schedule.status == status)
    return breakdown


def group_by_payment_status(collections: Sequence[CollectionRecord]) -> dict[str, int]:
    return {status: sum(1 for record in collections if record.status == status) for status in PAYMENT_STATUSES}


def camel_key(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def lookup(payload: Mapping[str, Any], key: str) -> Any:
    """Read ``key`` from a totals or groupings payload, accepting its camelCase spelling too."""
    if key in payload:
        return payload[key]
    return payload.get(camel_key(key))


def _ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


class Aggregator:
    """Builds one Report per report type from unfiltered record sets."""

    def waste_generation(
        self,
        collections: Sequence[CollectionRecord],
        schedules: Sequence[ScheduleRecord],
        filters: ReportFilters,
    ) -> Report:
        filtered_collections = filter_by_date_range(collections, filters.date_range)
        filtered_schedules = filter_by_date_range(schedules, filters.date_range)

        total_weight = sum((parse_amount(record.total_weight) for record in filtered_collections), 0.0)
        total_collections = len(filtered_collections)

        return Report(
            report_type=ReportType.WASTE_GENERATION,
            totals={
                "total_weight": total_weight,
                "total_collections": total_collections,
                "average_weight": _ratio(total_weight, total_collections),
            },
            groupings={
                BY_AREA: group_by_area(filtered_collections),
                BY_WASTE_TYPE: group_by_waste_type(filtered_collections),
            },
            collections=tuple(filtered_collections),
            schedules=tuple(filtered_schedules),
        )

    def collection_efficiency(
        self,
        collections: Sequence[CollectionRecord],
        schedules: Sequence[ScheduleRecord],
        filters: ReportFilters,
    ) -> Report:
        filtered_collections = filter_by_date_range(collections, filters.date_range)
        filtered_schedules = filter_by_date_range(schedules, filters.date_range)

        scheduled_pickups = len(filtered_schedules)
        completed_pickups = len(filtered_collections)

        return Report(
            report_type=ReportType.COLLECTION_EFFICIENCY,
            totals={
                "scheduled_pickups": scheduled_pickups,
                "completed_pickups": completed_pickups,
                "efficiency_rate": _ratio(completed_pickups, scheduled_pickups) * 100,
            },
            groupings={
                STATUS_BREAKDOWN: group_by_schedule_status(filtered_schedules, completed_pickups),
            },
            collections=tuple(filtered_collections),
            schedules=tuple(filtered_schedules),
        )

    def cost_analysis(self, collections: Sequence[CollectionRecord], filters: ReportFilters) -> Report:
        filtered_collections = filter_by_date_range(collections, filters.date_range)

        total_revenue = sum((parse_amount(record.total_cost) for record in filtered_collections), 0.0)
        paid_revenue = sum(
            (parse_amount(record.total_cost) for record in filtered_collections if record.status == "Paid"),
            0.0,
        )

        return Report(
            report_type=ReportType.COST_ANALYSIS,
            totals={
                "total_revenue": total_revenue,
                "average_cost": _ratio(total_revenue, len(filtered_collections)),
                "paid_revenue": paid_revenue,
            },
            groupings={
                PAYMENT_STATUS: group_by_payment_status(filtered_collections),
            },
            collections=tuple(filtered_collections),
        )
