from __future__ import annotations

import pytest

from waste_reports.common.errors import StoreUnavailable
from waste_reports.common.http import HttpClient, HttpRequestError, RetryConfig
from waste_reports.common.models import WrappedTimestamp
from waste_reports.store.firestore import FirestoreGateway, decode_document, decode_value

STORE_CONFIG = {
    "firestore": {
        "project_id": "demo-project",
        "database": "(default)",
        "base_url": "https://firestore.example.test/v1",
        "page_size": 2,
        "timeout_seconds": {"connect": 1, "read": 1},
        "retry": {"max_attempts": 1, "max_wait": 1},
        "rate_per_sec": 100,
    },
    "collections": {"collections": "garbageCollections", "schedules": "schedules", "users": "users"},
}


class FakeClient:
    def __init__(self, pages=None, error=None):
        self.pages = list(pages or [])
        self.error = error
        self.calls = []

    def get_json(self, url, *, params=None, headers=None, timeout=None):
        self.calls.append((url, params))
        if self.error is not None:
            raise self.error
        return self.pages.pop(0)


def _doc(doc_id: str, **fields):
    return {
        "name": f"projects/demo-project/databases/(default)/documents/garbageCollections/{doc_id}",
        "fields": fields,
    }


def test_decode_value_handles_typed_values():
    assert decode_value({"stringValue": "Paid"}) == "Paid"
    assert decode_value({"integerValue": "12"}) == 12
    assert decode_value({"doubleValue": 4.5}) == 4.5
    assert decode_value({"booleanValue": True}) is True
    assert decode_value({"nullValue": None}) is None
    assert decode_value({"arrayValue": {"values": [{"integerValue": "1"}, {"stringValue": "x"}]}}) == [1, "x"]
    assert decode_value({"mapValue": {"fields": {"a": {"stringValue": "b"}}}}) == {"a": "b"}
    assert decode_value({"arrayValue": {}}) == []
    assert decode_value({"geoPointValue": {"latitude": 1.5, "longitude": 2.5}}) == {"latitude": 1.5, "longitude": 2.5}


def test_decode_timestamp_value_becomes_wrapped_timestamp():
    assert decode_value({"timestampValue": "2024-02-01T00:00:00.250Z"}) == WrappedTimestamp(1706745600, 250_000_000)
    assert decode_value({"timestampValue": "2024-02-01T00:00:00Z"}) == WrappedTimestamp(1706745600, 0)


def test_decode_document_takes_id_from_name():
    doc_id, fields = decode_document(_doc("abc123", status={"stringValue": "Paid"}))
    assert doc_id == "abc123"
    assert fields == {"status": "Paid"}


def test_fetch_collections_follows_page_tokens():
    client = FakeClient(
        pages=[
            {
                "documents": [
                    _doc("c1", totalWeight={"doubleValue": 2.5}, createdAt={"timestampValue": "2024-02-01T00:00:00Z"}),
                    _doc("c2", totalWeight={"stringValue": "3"}),
                ],
                "nextPageToken": "page-2",
            },
            {"documents": [_doc("c3", wasteType={"stringValue": "Organic"})]},
        ]
    )
    records = FirestoreGateway(client, STORE_CONFIG).fetch_collections()

    assert [record.id for record in records] == ["c1", "c2", "c3"]
    assert records[0].created_at == WrappedTimestamp(1706745600)
    assert records[2].waste_type == "Organic"
    assert client.calls[0] == (
        "https://firestore.example.test/v1/projects/demo-project/databases/(default)/documents/garbageCollections",
        {"pageSize": 2},
    )
    assert client.calls[1][1] == {"pageSize": 2, "pageToken": "page-2"}


def test_empty_collection_returns_no_records():
    assert FirestoreGateway(FakeClient(pages=[{}]), STORE_CONFIG).fetch_schedules() == []


def test_repeated_page_token_is_store_unavailable():
    page = {"documents": [], "nextPageToken": "same"}
    with pytest.raises(StoreUnavailable):
        FirestoreGateway(FakeClient(pages=[page, page, page]), STORE_CONFIG).fetch_users()


def test_malformed_document_is_store_unavailable():
    with pytest.raises(StoreUnavailable):
        FirestoreGateway(FakeClient(pages=[{"documents": [{"fields": {}}]}]), STORE_CONFIG).fetch_collections()


def test_fetch_user_by_id_returns_none_on_not_found():
    client = FakeClient(error=HttpRequestError("HTTP status: 404", status_code=404))
    assert FirestoreGateway(client, STORE_CONFIG).fetch_user_by_id("ghost") is None
    assert client.calls[0][0].endswith("/documents/users/ghost")


def test_fetch_user_by_id_propagates_other_failures():
    client = FakeClient(error=HttpRequestError("HTTP status: 403", status_code=403))
    with pytest.raises(StoreUnavailable):
        FirestoreGateway(client, STORE_CONFIG).fetch_user_by_id("admin-1")


def test_gateway_over_real_client_with_fake_transport(monkeypatch):
    class FakeResponse:
        status_code = 200

        def json(self):
            return {
                "name": "projects/demo-project/databases/(default)/documents/users/admin-1",
                "fields": {"userType": {"stringValue": "business"}},
            }

    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse())

    account = FirestoreGateway(client, STORE_CONFIG).fetch_user_by_id("admin-1")
    assert account.id == "admin-1"
    assert account.get("userType") == "business"
