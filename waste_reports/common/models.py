"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Union

from waste_reports.common.errors import UnsupportedReportType


@dataclass(frozen=True)
class WrappedTimestamp:
    """Store-native timestamp (seconds + nanoseconds since the epoch, UTC)."""

    seconds: int
    nanos: int = 0

    def to_datetime(self) -> datetime:
        base = datetime.fromtimestamp(self.seconds, tz=timezone.utc)
        return base.replace(microsecond=self.nanos // 1000)

    @classmethod
    def from_datetime(cls, value: datetime) -> "WrappedTimestamp":
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return cls(seconds=int(value.timestamp()), nanos=value.microsecond * 1000)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "WrappedTimestamp | None":
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", value.get("nanos", 0)))
        if seconds is None:
            return None
        try:
            return cls(seconds=int(seconds), nanos=int(nanos or 0))
        except (TypeError, ValueError):
            return None


# A record timestamp is either an ISO-8601 string or a store-native timestamp.
Instant = Union[str, WrappedTimestamp]


def coerce_instant(value: Any) -> Instant | None:
    if isinstance(value, (str, WrappedTimestamp)):
        return value
    if isinstance(value, datetime):
        return WrappedTimestamp.from_datetime(value)
    if isinstance(value, Mapping):
        return WrappedTimestamp.from_mapping(value)
    return None


@dataclass(frozen=True)
class CollectionRecord:
    id: str
    address: str | None = None
    waste_type: str | None = None
    total_weight: Any = None
    total_cost: Any = None
    status: str | None = None
    created_at: Instant | None = None

    @classmethod
    def from_document(cls, doc_id: str, fields: Mapping[str, Any]) -> "CollectionRecord":
        return cls(
            id=doc_id,
            address=fields.get("address"),
            waste_type=fields.get("wasteType"),
            total_weight=fields.get("totalWeight"),
            total_cost=fields.get("totalCost"),
            status=fields.get("status"),
            created_at=coerce_instant(fields.get("createdAt")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScheduleRecord:
    id: str
    waste_type: str | None = None
    status: str | None = None
    created_at: Instant | None = None

    @classmethod
    def from_document(cls, doc_id: str, fields: Mapping[str, Any]) -> "ScheduleRecord":
        return cls(
            id=doc_id,
            waste_type=fields.get("wasteType"),
            status=fields.get("status"),
            created_at=coerce_instant(fields.get("createdAt")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AccountRecord:
    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc_id: str, fields: Mapping[str, Any]) -> "AccountRecord":
        return cls(id=doc_id, fields=dict(fields))

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


@dataclass(frozen=True)
class DateRange:
    start_date: str | None
    end_date: str | None

    @property
    def label(self) -> str:
        return f"{self.start_date} to {self.end_date}"


@dataclass(frozen=True)
class ReportFilters:
    """Filter selection for one report request. No date range means all time."""

    date_range: DateRange | None = None
    area: str | None = None
    waste_type: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "ReportFilters":
        payload = payload or {}
        raw_range = payload.get("dateRange") or payload.get("date_range")
        date_range = None
        if raw_range:
            date_range = DateRange(
                start_date=raw_range.get("startDate", raw_range.get("start_date")),
                end_date=raw_range.get("endDate", raw_range.get("end_date")),
            )
        return cls(
            date_range=date_range,
            area=payload.get("area"),
            waste_type=payload.get("wasteType", payload.get("waste_type")),
        )


@dataclass(frozen=True)
class Session:
    uid: str
    id_token: str | None = None


@dataclass(frozen=True)
class AuthorizedUser:
    uid: str
    account: AccountRecord


class ReportType(str, Enum):
    WASTE_GENERATION = "waste-generation"
    COLLECTION_EFFICIENCY = "collection-efficiency"
    COST_ANALYSIS = "cost-analysis"

    @classmethod
    def parse(cls, value: "ReportType | str") -> "ReportType":
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedReportType(f"Unsupported report type: {value}") from exc

    @property
    def dashboard_title(self) -> str:
        return REPORT_CATALOG[self]["title"]

    @property
    def description(self) -> str:
        return REPORT_CATALOG[self]["description"]

    @property
    def export_title(self) -> str:
        return REPORT_CATALOG[self]["export_title"]


REPORT_CATALOG: dict[ReportType, dict[str, str]] = {
    ReportType.WASTE_GENERATION: {
        "title": "Total waste collected",
        "description": "Total waste collected by area and time period",
        "export_title": "Total waste collected Report",
    },
    ReportType.COLLECTION_EFFICIENCY: {
        "title": "Schedules vs collected",
        "description": "Scheduled vs collected waste pickup performance",
        "export_title": "Schedules vs collected Report",
    },
    ReportType.COST_ANALYSIS: {
        "title": "Cost Analysis",
        "description": "Revenue, costs, and profitability metrics",
        "export_title": "Cost Analysis Report",
    },
}


@dataclass(frozen=True)
class Report:
    """Aggregated output for one (report type, filters) request.

    The post-filter raw records are kept so formatters can derive per-row
    detail without another read.
    """

    report_type: ReportType
    totals: dict[str, float | int]
    groupings: dict[str, dict[str, Any]]
    collections: tuple[CollectionRecord, ...] = ()
    schedules: tuple[ScheduleRecord, ...] = ()
    failed_sources: tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.failed_sources

    def grouping(self, name: str) -> dict[str, Any]:
        return self.groupings.get(name) or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "report_type": self.report_type.value,
            "totals": dict(self.totals),
            "groupings": {name: dict(values) for name, values in self.groupings.items()},
            "collections": [record.to_dict() for record in self.collections],
            "schedules": [record.to_dict() for record in self.schedules],
            "failed_sources": list(self.failed_sources),
        }


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str | int
    icon: str
    color: str
    trend: str = "up"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ChartPoint:
    name: str
    value: float | int
    color: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
