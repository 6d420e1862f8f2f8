"""Record store gateway contract shared by the concrete store backends."""

from __future__ import annotations

from typing import Protocol

from waste_reports.common.models import AccountRecord, CollectionRecord, ScheduleRecord


class RecordStoreGateway(Protocol):
    """Whole-set reads of the three record sets the reporting pipeline needs.

    Every method either returns the complete set or raises StoreUnavailable;
    a partial read is never returned.
    """

    def fetch_collections(self) -> list[CollectionRecord]: ...

    def fetch_schedules(self) -> list[ScheduleRecord]: ...

    def fetch_users(self) -> list[AccountRecord]: ...

    def fetch_user_by_id(self, uid: str) -> AccountRecord | None: ...
