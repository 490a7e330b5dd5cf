"""Threads of the assistants API and the resources attached to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

from assistclient.transport import Transport

THREADS_PATH = "/threads"


class ChunkingStrategyType(str, Enum):
    AUTO = "auto"
    STATIC = "static"


class ThreadMessageRole(str, Enum):
    ASSISTANT = "assistant"
    USER = "user"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class StaticChunkingStrategy:
    max_chunk_size_tokens: int
    chunk_overlap_tokens: int


@dataclass
class ChunkingStrategy:
    type: Union[ChunkingStrategyType, str]
    static: Optional[StaticChunkingStrategy] = None

    def to_dict(self) -> dict:
        data: dict = {"type": _text(self.type)}
        if self.static is not None:
            data["static"] = {
                "max_chunk_size_tokens": self.static.max_chunk_size_tokens,
                "chunk_overlap_tokens": self.static.chunk_overlap_tokens,
            }
        return data


@dataclass
class VectorStoreToolResources:
    """A vector store to create alongside a thread."""

    file_ids: list = field(default_factory=list)
    chunking_strategy: Optional[ChunkingStrategy] = None
    metadata: Optional[dict] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.file_ids:
            data["file_ids"] = list(self.file_ids)
        if self.chunking_strategy is not None:
            data["chunking_strategy"] = self.chunking_strategy.to_dict()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


def _ids_section(key: str, ids: Optional[list]) -> dict:
    return {key: list(ids)} if ids else {}


@dataclass
class ToolResources:
    """Resources the tools of a thread use.

    ``None`` means the tool section is absent; an empty list means it is
    present without ids.
    """

    code_interpreter_file_ids: Optional[list] = None
    file_search_vector_store_ids: Optional[list] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.code_interpreter_file_ids is not None:
            data["code_interpreter"] = _ids_section("file_ids", self.code_interpreter_file_ids)
        if self.file_search_vector_store_ids is not None:
            data["file_search"] = _ids_section("vector_store_ids", self.file_search_vector_store_ids)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ToolResources":
        data = data or {}
        code = data.get("code_interpreter")
        search = data.get("file_search")
        return cls(
            code_interpreter_file_ids=list(code.get("file_ids") or []) if isinstance(code, dict) else None,
            file_search_vector_store_ids=(
                list(search.get("vector_store_ids") or []) if isinstance(search, dict) else None
            ),
        )


@dataclass
class ToolResourcesRequest:
    """Tool resources sent when a thread is created."""

    code_interpreter_file_ids: Optional[list] = None
    file_search_vector_store_ids: Optional[list] = None
    file_search_vector_stores: Optional[list] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.code_interpreter_file_ids is not None:
            data["code_interpreter"] = _ids_section("file_ids", self.code_interpreter_file_ids)
        if self.file_search_vector_store_ids is not None or self.file_search_vector_stores is not None:
            search = _ids_section("vector_store_ids", self.file_search_vector_store_ids)
            if self.file_search_vector_stores:
                search["vector_stores"] = [store.to_dict() for store in self.file_search_vector_stores]
            data["file_search"] = search
        return data


@dataclass
class ThreadAttachment:
    file_id: str
    tools: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"file_id": self.file_id, "tools": [{"type": _text(tool)} for tool in self.tools]}


@dataclass
class ThreadMessage:
    role: Union[ThreadMessageRole, str]
    content: str
    file_ids: list = field(default_factory=list)
    attachments: list = field(default_factory=list)
    metadata: Optional[dict] = None

    def to_dict(self) -> dict:
        data: dict = {"role": _text(self.role), "content": self.content}
        if self.file_ids:
            data["file_ids"] = list(self.file_ids)
        if self.attachments:
            data["attachments"] = [attachment.to_dict() for attachment in self.attachments]
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class ThreadRequest:
    messages: list = field(default_factory=list)
    metadata: Optional[dict] = None
    tool_resources: Optional[ToolResourcesRequest] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.messages:
            data["messages"] = [message.to_dict() for message in self.messages]
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.tool_resources is not None:
            data["tool_resources"] = self.tool_resources.to_dict()
        return data


@dataclass
class ModifyThreadRequest:
    metadata: Optional[dict] = None
    tool_resources: Optional[ToolResources] = None

    def to_dict(self) -> dict:
        data: dict = {"metadata": None if self.metadata is None else dict(self.metadata)}
        if self.tool_resources is not None:
            data["tool_resources"] = self.tool_resources.to_dict()
        return data


@dataclass
class Thread:
    id: str = ""
    object: str = ""
    created_at: int = 0
    metadata: Optional[dict] = None
    tool_resources: ToolResources = field(default_factory=ToolResources)
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "Thread":
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            metadata=data.get("metadata"),
            tool_resources=ToolResources.from_dict(data.get("tool_resources")),
            headers=dict(headers or {}),
        )


@dataclass
class ThreadDeleteResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> "ThreadDeleteResponse":
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted", False)),
            headers=dict(headers or {}),
        )


def create_thread(transport: Transport, request: ThreadRequest) -> Thread:
    """Create a new thread."""
    response = transport.request("POST", THREADS_PATH, body=request.to_dict(), assistants=True)
    return Thread.from_dict(response.json(), response.headers)


def retrieve_thread(transport: Transport, thread_id: str) -> Thread:
    """Fetch a thread."""
    response = transport.request("GET", f"{THREADS_PATH}/{thread_id}", assistants=True)
    return Thread.from_dict(response.json(), response.headers)


def modify_thread(transport: Transport, thread_id: str, request: ModifyThreadRequest) -> Thread:
    """Change the metadata or tool resources of a thread."""
    response = transport.request(
        "POST", f"{THREADS_PATH}/{thread_id}", body=request.to_dict(), assistants=True
    )
    return Thread.from_dict(response.json(), response.headers)


def delete_thread(transport: Transport, thread_id: str) -> ThreadDeleteResponse:
    """Delete a thread."""
    response = transport.request("DELETE", f"{THREADS_PATH}/{thread_id}", assistants=True)
    return ThreadDeleteResponse.from_dict(response.json(), response.headers)