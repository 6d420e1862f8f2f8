"""Gateway serving record sets from a local JSON snapshot of the store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, TypeVar

from waste_reports.common.errors import StoreUnavailable
from waste_reports.common.fs import read_json
from waste_reports.common.models import AccountRecord, CollectionRecord, ScheduleRecord

T = TypeVar("T")

DEFAULT_COLLECTION_NAMES = {
    "collections": "garbageCollections",
    "schedules": "schedules",
    "users": "users",
}


def _iter_documents(raw: Any) -> list[tuple[str, dict[str, Any]]]:
    # Snapshots hold either [{"id": ..., **fields}] or {id: fields}.
    if isinstance(raw, dict):
        return [(str(doc_id), dict(fields or {})) for doc_id, fields in raw.items()]
    documents = []
    for idx, item in enumerate(raw or []):
        fields = dict(item)
        doc_id = fields.pop("id", None)
        documents.append((str(doc_id) if doc_id is not None else str(idx), fields))
    return documents


class SnapshotGateway:
    def __init__(self, path: Path, collection_names: dict[str, str] | None = None) -> None:
        self.path = path
        self.collection_names = dict(collection_names or DEFAULT_COLLECTION_NAMES)

    def _read_set(self, source: str) -> list[tuple[str, dict[str, Any]]]:
        try:
            payload = read_json(self.path)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailable(f"Unreadable snapshot: {self.path}") from exc
        if not isinstance(payload, dict):
            raise StoreUnavailable(f"Snapshot must be a JSON object: {self.path}")
        try:
            return _iter_documents(payload.get(self.collection_names[source], []))
        except (TypeError, ValueError) as exc:
            raise StoreUnavailable(f"Malformed {source} set in snapshot: {self.path}") from exc

    def _fetch(self, source: str, build: Callable[[str, dict[str, Any]], T]) -> list[T]:
        return [build(doc_id, fields) for doc_id, fields in self._read_set(source)]

    def fetch_collections(self) -> list[CollectionRecord]:
        return self._fetch("collections", CollectionRecord.from_document)

    def fetch_schedules(self) -> list[ScheduleRecord]:
        return self._fetch("schedules", ScheduleRecord.from_document)

    def fetch_users(self) -> list[AccountRecord]:
        return self._fetch("users", AccountRecord.from_document)

    def fetch_user_by_id(self, uid: str) -> AccountRecord | None:
        for account in self.fetch_users():
            if account.id == uid:
                return account
        return None
