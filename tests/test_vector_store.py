import io
import json

import pytest

from assistclient.transport import APIError, ApiResponse, Pagination, Transport
from assistclient.vector_store import (
    VectorStore,
    VectorStoreExpires,
    VectorStoreFileCount,
    VectorStoreRequest,
    cancel_vector_store_file_batch,
    create_vector_store,
    create_vector_store_file,
    create_vector_store_file_batch,
    delete_vector_store,
    delete_vector_store_file,
    list_vector_store_files,
    list_vector_store_files_in_batch,
    list_vector_stores,
    modify_vector_store,
    retrieve_vector_store,
    retrieve_vector_store_file,
    retrieve_vector_store_file_batch,
)

BASE = "http://localhost/v1"
STORE_ID = "vs_abc123"
STORE_NAME = "TestStore"
FILE_ID = "file-abc123"
BATCH_ID = "vsfb_abc123"
PAGINATION = Pagination(limit=20, order="desc", after="vs_abc122", before="vs_abc123")
QUERY = "?after=vs_abc122&before=vs_abc123&limit=20&order=desc"


class FakeServer:
    def __init__(self):
        self.routes = {}
        self.requests = []

    def route(self, method, path, handler):
        self.routes[(method, path)] = handler

    def __call__(self, prepared):
        self.requests.append(prepared)
        body = json.loads(prepared.body) if prepared.body else None
        key = (prepared.method, prepared.url[len(BASE):])
        if key not in self.routes:
            payload = b'{"error":{"message":"not found","type":"invalid_request_error"}}'
            return ApiResponse(404, {}, io.BytesIO(payload))
        handler = self.routes[key]
        payload = handler(body) if callable(handler) else handler
        if not isinstance(payload, bytes):
            payload = json.dumps(payload).encode()
        return ApiResponse(200, {}, io.BytesIO(payload))


def _file(**extra):
    return {
        "id": FILE_ID,
        "object": "vector_store.file",
        "created_at": 1234567890,
        "vector_store_id": STORE_ID,
        **extra,
    }


def _batch(status, completed):
    return {
        "id": BATCH_ID,
        "object": "vector_store.file_batch",
        "created_at": 1234567890,
        "vector_store_id": STORE_ID,
        "status": status,
        "file_counts": {"completed": completed},
    }


@pytest.fixture
def server():
    fake = FakeServer()
    store = {"id": STORE_ID, "object": "vector_store", "created_at": 1234567890, "name": STORE_NAME}
    store_path = f"/vector_stores/{STORE_ID}"
    fake.route("GET", f"{store_path}/files/{FILE_ID}", _file(status="completed"))
    # Not valid JSON: the delete call must not parse the body.
    fake.route("DELETE", f"{store_path}/files/{FILE_ID}", b"{id: x, deleted: true}")
    fake.route("GET", f"{store_path}/files{QUERY}", {"data": [_file()]})
    fake.route("POST", f"{store_path}/files", lambda body: _file(id=body["file_id"]))
    fake.route("GET", f"{store_path}/file_batches/{BATCH_ID}/files{QUERY}", {"data": [_file()]})
    fake.route("POST", f"{store_path}/file_batches/{BATCH_ID}/cancel", _batch("cancelling", 1))
    fake.route("GET", f"{store_path}/file_batches/{BATCH_ID}", _batch("completed", 1))
    fake.route("POST", f"{store_path}/file_batches", lambda body: _batch("completed", len(body["file_ids"])))
    fake.route("GET", store_path, store)
    fake.route("POST", store_path, lambda body: {**store, "name": body.get("name", "")})
    fake.route("DELETE", store_path, {"id": "vectorstore_abc123", "object": "vector_store.deleted", "deleted": True})
    fake.route("POST", "/vector_stores", lambda body: {**store, "name": body["name"], "file_counts": {}})
    fake.route(
        "GET",
        f"/vector_stores{QUERY}",
        {"data": [store], "last_id": STORE_ID, "first_id": STORE_ID, "has_more": False},
    )
    return fake


@pytest.fixture
def transport(server):
    return Transport("token", BASE, sender=server)


def test_create_vector_store(server, transport):
    store = create_vector_store(transport, VectorStoreRequest(name=STORE_NAME))
    assert store.id == STORE_ID
    assert store.name == STORE_NAME
    assert store.file_counts == VectorStoreFileCount()
    assert json.loads(server.requests[-1].body) == {"name": STORE_NAME}
    assert server.requests[-1].headers["OpenAI-Beta"] == "assistants=v2"


def test_retrieve_vector_store(transport):
    store = retrieve_vector_store(transport, STORE_ID)
    assert store.object == "vector_store"
    assert store.expires_after is None
    assert store.expires_at is None


def test_delete_vector_store(transport):
    result = delete_vector_store(transport, STORE_ID)
    assert result.deleted is True
    assert result.object == "vector_store.deleted"


def test_list_vector_stores(server, transport):
    listing = list_vector_stores(transport, PAGINATION)
    assert [store.id for store in listing.vector_stores] == [STORE_ID]
    assert listing.first_id == STORE_ID
    assert listing.last_id == STORE_ID
    assert server.requests[-1].url == f"{BASE}/vector_stores{QUERY}"


def test_create_vector_store_file(server, transport):
    created = create_vector_store_file(transport, STORE_ID, FILE_ID)
    assert created.id == FILE_ID
    assert json.loads(server.requests[-1].body) == {"file_id": FILE_ID}


def test_list_vector_store_files(transport):
    listing = list_vector_store_files(transport, STORE_ID, PAGINATION)
    assert [item.id for item in listing.vector_store_files] == [FILE_ID]
    assert listing.has_more is False


def test_retrieve_vector_store_file(transport):
    item = retrieve_vector_store_file(transport, STORE_ID, FILE_ID)
    assert item.status == "completed"
    assert item.vector_store_id == STORE_ID


def test_delete_vector_store_file_ignores_body(server, transport):
    assert delete_vector_store_file(transport, STORE_ID, FILE_ID) is None
    assert server.requests[-1].method == "DELETE"


def test_modify_vector_store(server, transport):
    store = modify_vector_store(transport, STORE_ID, VectorStoreRequest(name="Renamed"))
    assert store.name == "Renamed"
    assert server.requests[-1].method == "POST"


def test_create_vector_store_file_batch(transport):
    batch = create_vector_store_file_batch(transport, STORE_ID, [FILE_ID, "file-def456"])
    assert batch.id == BATCH_ID
    assert batch.file_counts.completed == 2


def test_retrieve_vector_store_file_batch(transport):
    batch = retrieve_vector_store_file_batch(transport, STORE_ID, BATCH_ID)
    assert batch.status == "completed"
    assert batch.file_counts.completed == 1


def test_list_vector_store_files_in_batch(server, transport):
    listing = list_vector_store_files_in_batch(transport, STORE_ID, BATCH_ID, PAGINATION)
    assert len(listing.vector_store_files) == 1
    assert server.requests[-1].url == f"{BASE}/vector_stores/{STORE_ID}/file_batches/{BATCH_ID}/files{QUERY}"


def test_cancel_vector_store_file_batch(transport):
    batch = cancel_vector_store_file_batch(transport, STORE_ID, BATCH_ID)
    assert batch.status == "cancelling"


def test_unknown_store_raises_api_error(transport):
    with pytest.raises(APIError) as info:
        retrieve_vector_store(transport, "vs_missing")
    assert info.value.http_status_code == 404


def test_empty_pagination_has_no_query(server, transport):
    with pytest.raises(APIError):
        list_vector_stores(transport, Pagination())
    assert server.requests[-1].url == f"{BASE}/vector_stores"


def test_request_to_dict_with_expiry():
    request = VectorStoreRequest(
        name="docs",
        file_ids=["f1"],
        expires_after=VectorStoreExpires("last_active_at", 7),
        metadata={"team": "a"},
    )
    assert request.to_dict() == {
        "name": "docs",
        "file_ids": ["f1"],
        "expires_after": {"anchor": "last_active_at", "days": 7},
        "metadata": {"team": "a"},
    }
    assert VectorStoreRequest().to_dict() == {}


def test_vector_store_from_dict_reads_expiry():
    store = VectorStore.from_dict(
        {
            "id": "vs_1",
            "expires_after": {"anchor": "last_active_at", "days": 3},
            "expires_at": 1700000000,
            "file_counts": {"in_progress": 1, "total": 4},
        }
    )
    assert store.expires_after == VectorStoreExpires("last_active_at", 3)
    assert store.expires_at == 1700000000
    assert store.file_counts == VectorStoreFileCount(in_progress=1, total=4)