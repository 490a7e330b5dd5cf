"""Vector stores, their files and file batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from assistclient.transport import Pagination, Transport

VECTOR_STORES_PATH = "/vector_stores"
FILES_PATH = "/files"
FILE_BATCHES_PATH = "/file_batches"


@dataclass
class VectorStoreFileCount:
    in_progress: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0
    total: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "VectorStoreFileCount":
        data = data or {}
        return cls(
            in_progress=int(data.get("in_progress") or 0),
            completed=int(data.get("completed") or 0),
            failed=int(data.get("failed") or 0),
            cancelled=int(data.get("cancelled") or 0),
            total=int(data.get("total") or 0),
        )


@dataclass
class VectorStoreExpires:
    anchor: str
    days: int

    def to_dict(self) -> dict:
        return {"anchor": self.anchor, "days": self.days}


def _expires(data: Any) -> Optional[VectorStoreExpires]:
    if not isinstance(data, dict):
        return None
    return VectorStoreExpires(anchor=data.get("anchor") or "", days=int(data.get("days") or 0))


@dataclass
class VectorStore:
    id: str = ""
    object: str = ""
    created_at: int = 0
    name: str = ""
    usage_bytes: int = 0
    file_counts: VectorStoreFileCount = field(default_factory=VectorStoreFileCount)
    status: str = ""
    expires_after: Optional[VectorStoreExpires] = None
    expires_at: Optional[int] = None
    metadata: Optional[dict] = None
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "VectorStore":
        expires_at = data.get("expires_at")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            name=data.get("name") or "",
            usage_bytes=int(data.get("usage_bytes") or 0),
            file_counts=VectorStoreFileCount.from_dict(data.get("file_counts")),
            status=data.get("status") or "",
            expires_after=_expires(data.get("expires_after")),
            expires_at=None if expires_at is None else int(expires_at),
            metadata=data.get("metadata"),
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreRequest:
    name: str = ""
    file_ids: list = field(default_factory=list)
    expires_after: Optional[VectorStoreExpires] = None
    metadata: Optional[dict] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.name:
            data["name"] = self.name
        if self.file_ids:
            data["file_ids"] = list(self.file_ids)
        if self.expires_after is not None:
            data["expires_after"] = self.expires_after.to_dict()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class VectorStoresList:
    vector_stores: list = field(default_factory=list)
    last_id: Optional[str] = None
    first_id: Optional[str] = None
    has_more: bool = False
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> "VectorStoresList":
        return cls(
            vector_stores=[VectorStore.from_dict(item) for item in data.get("data") or []],
            last_id=data.get("last_id"),
            first_id=data.get("first_id"),
            has_more=bool(data.get("has_more", False)),
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreDeleteResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> "VectorStoreDeleteResponse":
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted", False)),
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreFile:
    id: str = ""
    object: str = ""
    created_at: int = 0
    vector_store_id: str = ""
    usage_bytes: int = 0
    status: str = ""
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> "VectorStoreFile":
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            vector_store_id=data.get("vector_store_id") or "",
            usage_bytes=int(data.get("usage_bytes") or 0),
            status=data.get("status") or "",
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreFilesList:
    vector_store_files: list = field(default_factory=list)
    first_id: Optional[str] = None
    last_id: Optional[str] = None
    has_more: bool = False
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> "VectorStoreFilesList":
        return cls(
            vector_store_files=[VectorStoreFile.from_dict(item) for item in data.get("data") or []],
            first_id=data.get("first_id"),
            last_id=data.get("last_id"),
            has_more=bool(data.get("has_more", False)),
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreFileBatch:
    id: str = ""
    object: str = ""
    created_at: int = 0
    vector_store_id: str = ""
    status: str = ""
    file_counts: VectorStoreFileCount = field(default_factory=VectorStoreFileCount)
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> "VectorStoreFileBatch":
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            vector_store_id=data.get("vector_store_id") or "",
            status=data.get("status") or "",
            file_counts=VectorStoreFileCount.from_dict(data.get("file_counts")),
            headers=dict(headers or {}),
        )


def _store_path(vector_store_id: str, *parts: str) -> str:
    return f"{VECTOR_STORES_PATH}/{vector_store_id}" + "".join(parts)


def create_vector_store(transport: Transport, request: VectorStoreRequest) -> VectorStore:
    """Create a vector store."""
    response = transport.request("POST", VECTOR_STORES_PATH, body=request.to_dict(), assistants=True)
    return VectorStore.from_dict(response.json(), response.headers)


def retrieve_vector_store(transport: Transport, vector_store_id: str) -> VectorStore:
    """Fetch a vector store."""
    response = transport.request("GET", _store_path(vector_store_id), assistants=True)
    return VectorStore.from_dict(response.json(), response.headers)


def modify_vector_store(
    transport: Transport, vector_store_id: str, request: VectorStoreRequest
) -> VectorStore:
    """Change a vector store."""
    response = transport.request(
        "POST", _store_path(vector_store_id), body=request.to_dict(), assistants=True
    )
    return VectorStore.from_dict(response.json(), response.headers)


def delete_vector_store(transport: Transport, vector_store_id: str) -> VectorStoreDeleteResponse:
    """Delete a vector store."""
    response = transport.request("DELETE", _store_path(vector_store_id), assistants=True)
    return VectorStoreDeleteResponse.from_dict(response.json(), response.headers)


def list_vector_stores(transport: Transport, pagination: Pagination) -> VectorStoresList:
    """List vector stores."""
    response = transport.request(
        "GET", VECTOR_STORES_PATH + pagination.query_string(), assistants=True
    )
    return VectorStoresList.from_dict(response.json(), response.headers)


def create_vector_store_file(transport: Transport, vector_store_id: str, file_id: str) -> VectorStoreFile:
    """Attach a file to a vector store."""
    response = transport.request(
        "POST", _store_path(vector_store_id, FILES_PATH), body={"file_id": file_id}, assistants=True
    )
    return VectorStoreFile.from_dict(response.json(), response.headers)


def retrieve_vector_store_file(transport: Transport, vector_store_id: str, file_id: str) -> VectorStoreFile:
    """Fetch a file of a vector store."""
    response = transport.request("GET", _store_path(vector_store_id, FILES_PATH, "/", file_id), assistants=True)
    return VectorStoreFile.from_dict(response.json(), response.headers)


def delete_vector_store_file(transport: Transport, vector_store_id: str, file_id: str) -> None:
    """Remove a file from a vector store; the response body is ignored."""
    transport.request("DELETE", _store_path(vector_store_id, FILES_PATH, "/", file_id), assistants=True)


def list_vector_store_files(
    transport: Transport, vector_store_id: str, pagination: Pagination
) -> VectorStoreFilesList:
    """List the files of a vector store."""
    response = transport.request(
        "GET", _store_path(vector_store_id, FILES_PATH, pagination.query_string()), assistants=True
    )
    return VectorStoreFilesList.from_dict(response.json(), response.headers)


def create_vector_store_file_batch(
    transport: Transport, vector_store_id: str, file_ids: Iterable[str]
) -> VectorStoreFileBatch:
    """Attach several files to a vector store at once."""
    response = transport.request(
        "POST",
        _store_path(vector_store_id, FILE_BATCHES_PATH),
        body={"file_ids": list(file_ids)},
        assistants=True,
    )
    return VectorStoreFileBatch.from_dict(response.json(), response.headers)


def retrieve_vector_store_file_batch(
    transport: Transport, vector_store_id: str, batch_id: str
) -> VectorStoreFileBatch:
    """Fetch a file batch."""
    response = transport.request(
        "GET", _store_path(vector_store_id, FILE_BATCHES_PATH, "/", batch_id), assistants=True
    )
    return VectorStoreFileBatch.from_dict(response.json(), response.headers)


def cancel_vector_store_file_batch(
    transport: Transport, vector_store_id: str, batch_id: str
) -> VectorStoreFileBatch:
    """Cancel a file batch."""
    response = transport.request(
        "POST", _store_path(vector_store_id, FILE_BATCHES_PATH, "/", batch_id, "/cancel"), assistants=True
    )
    return VectorStoreFileBatch.from_dict(response.json(), response.headers)


def list_vector_store_files_in_batch(
    transport: Transport, vector_store_id: str, batch_id: str, pagination: Pagination
) -> VectorStoreFilesList:
    """List the files of a file batch."""
    path = _store_path(vector_store_id, FILE_BATCHES_PATH, "/", batch_id, "/files", pagination.query_string())
    response = transport.request("GET", path, assistants=True)
    return VectorStoreFilesList.from_dict(response.json(), response.headers)