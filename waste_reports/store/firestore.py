"""Document store gateway over the Firestore REST interface."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, TypeVar
from urllib.parse import quote

from waste_reports.common.errors import StoreUnavailable
from waste_reports.common.http import HttpClient, HttpRequestError
from waste_reports.common.models import (
    AccountRecord,
    CollectionRecord,
    ScheduleRecord,
    WrappedTimestamp,
)

T = TypeVar("T")

_RFC3339 = re.compile(r"^(?P<base>[^.]+?)(?:\.(?P<frac>\d+))?(?P<offset>Z|z|[+-]\d{2}:\d{2})$")


def _parse_timestamp(text: str) -> WrappedTimestamp | str:
    match = _RFC3339.match(text)
    if match is None:
        return text
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        base = datetime.fromisoformat(f"{match.group('base')}{offset}")
    except ValueError:
        return text
    frac = (match.group("frac") or "").ljust(9, "0")[:9]
    return WrappedTimestamp(seconds=int(base.timestamp()), nanos=int(frac))


def decode_value(value: dict[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return _parse_timestamp(str(value["timestampValue"]))
    if "stringValue" in value:
        return value["stringValue"]
    if "bytesValue" in value:
        return value["bytesValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        point = value["geoPointValue"] or {}
        return {"latitude": point.get("latitude"), "longitude": point.get("longitude")}
    if "arrayValue" in value:
        return [decode_value(item) for item in (value["arrayValue"] or {}).get("values", [])]
    if "mapValue" in value:
        return decode_fields((value["mapValue"] or {}).get("fields", {}))
    return None


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(raw) for key, raw in fields.items()}


def decode_document(document: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    name = document["name"]
    doc_id = name.rstrip("/").rsplit("/", 1)[-1]
    return doc_id, decode_fields(document.get("fields") or {})


class FirestoreGateway:
    def __init__(self, client: HttpClient, store_config: dict) -> None:
        firestore = store_config["firestore"]
        self.client = client
        self.collection_names = dict(store_config["collections"])
        self.page_size = int(firestore["page_size"])
        self.documents_url = (
            f"{firestore['base_url'].rstrip('/')}/projects/{firestore['project_id']}"
            f"/databases/{firestore['database']}/documents"
        )

    def _list_documents(self, collection_name: str) -> list[tuple[str, dict[str, Any]]]:
        url = f"{self.documents_url}/{quote(collection_name, safe='')}"
        documents: list[tuple[str, dict[str, Any]]] = []
        page_token: str | None = None
        seen_tokens: set[str] = set()

        while True:
            params: dict[str, Any] = {"pageSize": self.page_size}
            if page_token:
                params["pageToken"] = page_token
            payload = self.client.get_json(url, params=params)
            try:
                documents.extend(decode_document(doc) for doc in payload.get("documents", []))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise StoreUnavailable(f"Malformed document in {collection_name}") from exc

            page_token = payload.get("nextPageToken")
            if not page_token:
                return documents
            if page_token in seen_tokens:
                raise StoreUnavailable(f"Paging loop detected while reading {collection_name}")
            seen_tokens.add(page_token)

    def _fetch(self, source: str, build: Callable[[str, dict[str, Any]], T]) -> list[T]:
        return [build(doc_id, fields) for doc_id, fields in self._list_documents(self.collection_names[source])]

    def fetch_collections(self) -> list[CollectionRecord]:
        return self._fetch("collections", CollectionRecord.from_document)

    def fetch_schedules(self) -> list[ScheduleRecord]:
        return self._fetch("schedules", ScheduleRecord.from_document)

    def fetch_users(self) -> list[AccountRecord]:
        return self._fetch("users", AccountRecord.from_document)

    def fetch_user_by_id(self, uid: str) -> AccountRecord | None:
        users = quote(self.collection_names["users"], safe="")
        url = f"{self.documents_url}/{users}/{quote(uid, safe='')}"
        try:
            payload = self.client.get_json(url)
        except HttpRequestError as exc:
            if exc.status_code == 404:
                return None
            raise
        try:
            doc_id, fields = decode_document(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise StoreUnavailable(f"Malformed account document for {uid}") from exc
        return AccountRecord.from_document(doc_id, fields)
