"""Runs of the assistants API, their steps and the requests that drive them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

from assistclient.thread import ThreadRequest
from assistclient.transport import Pagination, Transport

THREADS_PATH = "/threads"


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class RequiredActionType(str, Enum):
    SUBMIT_TOOL_OUTPUTS = "submit_tool_outputs"


class RunError(str, Enum):
    SERVER_ERROR = "server_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class TruncationStrategy(str, Enum):
    # Messages in the middle of the thread are dropped to fit the context length.
    AUTO = "auto"
    # The thread is truncated to the n most recent messages.
    LAST_MESSAGES = "last_messages"


class RunStepStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    CANCELLING = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"


class RunStepType(str, Enum):
    MESSAGE_CREATION = "message_creation"
    TOOL_CALLS = "tool_calls"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _coerce(enum_cls: type, value: Any) -> Any:
    """Return the enum member for ``value``, or the raw string if unknown."""
    if value is None:
        return ""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _dump(value: Any) -> Any:
    return value.to_dict() if hasattr(value, "to_dict") else value


@dataclass
class ThreadTruncationStrategy:
    """How the thread is truncated before a run; the server default is auto."""

    type: Union[TruncationStrategy, str, None] = None
    last_messages: Optional[int] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.type:
            data["type"] = _text(self.type)
        if self.last_messages is not None:
            data["last_messages"] = self.last_messages
        return data


def _truncation_from(data: Any) -> Optional[ThreadTruncationStrategy]:
    if not isinstance(data, dict):
        return None
    kind = data.get("type")
    return ThreadTruncationStrategy(
        type=_coerce(TruncationStrategy, kind) if kind else None,
        last_messages=_optional_int(data.get("last_messages")),
    )


@dataclass
class RunLastError:
    code: Union[RunError, str] = ""
    message: str = ""


def _last_error_from(data: Any) -> Optional[RunLastError]:
    if not isinstance(data, dict):
        return None
    return RunLastError(code=_coerce(RunError, data.get("code")), message=data.get("message") or "")


@dataclass
class RunRequiredAction:
    type: Union[RequiredActionType, str] = ""
    tool_calls: Optional[list] = None


def _required_action_from(data: Any) -> Optional[RunRequiredAction]:
    if not isinstance(data, dict):
        return None
    submit = data.get("submit_tool_outputs")
    return RunRequiredAction(
        type=_coerce(RequiredActionType, data.get("type")),
        tool_calls=list(submit.get("tool_calls") or []) if isinstance(submit, dict) else None,
    )


@dataclass
class Run:
    id: str = ""
    object: str = ""
    created_at: int = 0
    thread_id: str = ""
    assistant_id: str = ""
    status: Union[RunStatus, str] = ""
    required_action: Optional[RunRequiredAction] = None
    last_error: Optional[RunLastError] = None
    expires_at: int = 0
    started_at: Optional[int] = None
    cancelled_at: Optional[int] = None
    failed_at: Optional[int] = None
    completed_at: Optional[int] = None
    model: str = ""
    instructions: str = ""
    tools: list = field(default_factory=list)
    file_ids: list = field(default_factory=list)
    metadata: Optional[dict] = None
    usage: dict = field(default_factory=dict)
    temperature: Optional[float] = None
    max_prompt_tokens: int = 0
    max_completion_tokens: int = 0
    truncation_strategy: Optional[ThreadTruncationStrategy] = None
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "Run":
        temperature = data.get("temperature")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            thread_id=data.get("thread_id") or "",
            assistant_id=data.get("assistant_id") or "",
            status=_coerce(RunStatus, data.get("status")),
            required_action=_required_action_from(data.get("required_action")),
            last_error=_last_error_from(data.get("last_error")),
            expires_at=int(data.get("expires_at") or 0),
            started_at=_optional_int(data.get("started_at")),
            cancelled_at=_optional_int(data.get("cancelled_at")),
            failed_at=_optional_int(data.get("failed_at")),
            completed_at=_optional_int(data.get("completed_at")),
            model=data.get("model") or "",
            instructions=data.get("instructions") or "",
            tools=list(data.get("tools") or []),
            file_ids=list(data.get("file_ids") or []),
            metadata=data.get("metadata"),
            usage=dict(data.get("usage") or {}),
            temperature=None if temperature is None else float(temperature),
            max_prompt_tokens=int(data.get("max_prompt_tokens") or 0),
            max_completion_tokens=int(data.get("max_completion_tokens") or 0),
            truncation_strategy=_truncation_from(data.get("truncation_strategy")),
            headers=dict(headers or {}),
        )


@dataclass
class RunRequest:
    """Parameters of a new run.

    ``tool_choice`` and ``response_format`` may be a string or an object;
    ``parallel_tool_calls`` is sent whenever it is not None.
    """

    assistant_id: str = ""
    model: str = ""
    instructions: str = ""
    additional_instructions: str = ""
    additional_messages: list = field(default_factory=list)
    tools: list = field(default_factory=list)
    metadata: Optional[dict] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_prompt_tokens: int = 0
    max_completion_tokens: int = 0
    truncation_strategy: Optional[ThreadTruncationStrategy] = None
    tool_choice: Any = None
    response_format: Any = None
    parallel_tool_calls: Any = None

    def to_dict(self) -> dict:
        data: dict = {"assistant_id": self.assistant_id}
        for key in ("model", "instructions", "additional_instructions"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.additional_messages:
            data["additional_messages"] = [_dump(message) for message in self.additional_messages]
        if self.tools:
            data["tools"] = [_dump(tool) for tool in self.tools]
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.temperature is not None:
            data["temperature"] = self.temperature
        if self.top_p is not None:
            data["top_p"] = self.top_p
        if self.max_prompt_tokens:
            data["max_prompt_tokens"] = self.max_prompt_tokens
        if self.max_completion_tokens:
            data["max_completion_tokens"] = self.max_completion_tokens
        if self.truncation_strategy is not None:
            data["truncation_strategy"] = self.truncation_strategy.to_dict()
        for key in ("tool_choice", "response_format", "parallel_tool_calls"):
            value = getattr(self, key)
            if value is not None:
                data[key] = _dump(value)
        return data


@dataclass
class RunModifyRequest:
    metadata: Optional[dict] = None

    def to_dict(self) -> dict:
        return {"metadata": dict(self.metadata)} if self.metadata else {}


@dataclass
class RunList:
    runs: list = field(default_factory=list)
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "RunList":
        return cls(
            runs=[Run.from_dict(item) for item in data.get("data") or []],
            headers=dict(headers or {}),
        )


@dataclass
class ToolOutput:
    tool_call_id: str
    output: Any = None


@dataclass
class SubmitToolOutputsRequest:
    tool_outputs: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tool_outputs": [
                {"tool_call_id": item.tool_call_id, "output": item.output} for item in self.tool_outputs
            ]
        }


@dataclass
class CreateThreadAndRunRequest:
    run: RunRequest = field(default_factory=RunRequest)
    thread: ThreadRequest = field(default_factory=ThreadRequest)

    def to_dict(self) -> dict:
        data = self.run.to_dict()
        data["thread"] = self.thread.to_dict()
        return data


@dataclass
class StepDetails:
    type: Union[RunStepType, str] = ""
    message_id: Optional[str] = None
    tool_calls: list = field(default_factory=list)


def _step_details_from(data: Any) -> StepDetails:
    if not isinstance(data, dict):
        return StepDetails()
    creation = data.get("message_creation")
    return StepDetails(
        type=_coerce(RunStepType, data.get("type")),
        message_id=(creation.get("message_id") or "") if isinstance(creation, dict) else None,
        tool_calls=list(data.get("tool_calls") or []),
    )


@dataclass
class RunStep:
    id: str = ""
    object: str = ""
    created_at: int = 0
    assistant_id: str = ""
    thread_id: str = ""
    run_id: str = ""
    type: Union[RunStepType, str] = ""
    status: Union[RunStepStatus, str] = ""
    step_details: StepDetails = field(default_factory=StepDetails)
    last_error: Optional[RunLastError] = None
    expired_at: Optional[int] = None
    cancelled_at: Optional[int] = None
    failed_at: Optional[int] = None
    completed_at: Optional[int] = None
    metadata: Optional[dict] = None
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "RunStep":
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            assistant_id=data.get("assistant_id") or "",
            thread_id=data.get("thread_id") or "",
            run_id=data.get("run_id") or "",
            type=_coerce(RunStepType, data.get("type")),
            status=_coerce(RunStepStatus, data.get("status")),
            step_details=_step_details_from(data.get("step_details")),
            last_error=_last_error_from(data.get("last_error")),
            expired_at=_optional_int(data.get("expired_at")),
            cancelled_at=_optional_int(data.get("cancelled_at")),
            failed_at=_optional_int(data.get("failed_at")),
            completed_at=_optional_int(data.get("completed_at")),
            metadata=data.get("metadata"),
            headers=dict(headers or {}),
        )


@dataclass
class RunStepList:
    run_steps: list = field(default_factory=list)
    first_id: str = ""
    last_id: str = ""
    has_more: bool = False
    headers: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "RunStepList":
        return cls(
            run_steps=[RunStep.from_dict(item) for item in data.get("data") or []],
            first_id=data.get("first_id") or "",
            last_id=data.get("last_id") or "",
            has_more=bool(data.get("has_more", False)),
            headers=dict(headers or {}),
        )


def _runs_path(thread_id: str, *parts: str) -> str:
    return f"{THREADS_PATH}/{thread_id}/runs" + "".join(parts)


def create_run(transport: Transport, thread_id: str, request: RunRequest) -> Run:
    """Start a run on a thread."""
    response = transport.request("POST", _runs_path(thread_id), body=request.to_dict(), assistants=True)
    return Run.from_dict(response.json(), response.headers)


def retrieve_run(transport: Transport, thread_id: str, run_id: str) -> Run:
    """Fetch a run."""
    response = transport.request("GET", _runs_path(thread_id, "/", run_id), assistants=True)
    return Run.from_dict(response.json(), response.headers)


def modify_run(transport: Transport, thread_id: str, run_id: str, request: RunModifyRequest) -> Run:
    """Change the metadata of a run."""
    response = transport.request(
        "POST", _runs_path(thread_id, "/", run_id), body=request.to_dict(), assistants=True
    )
    return Run.from_dict(response.json(), response.headers)


def list_runs(transport: Transport, thread_id: str, pagination: Pagination) -> RunList:
    """List the runs of a thread."""
    response = transport.request("GET", _runs_path(thread_id, pagination.query_string()), assistants=True)
    return RunList.from_dict(response.json(), response.headers)


def submit_tool_outputs(
    transport: Transport, thread_id: str, run_id: str, request: SubmitToolOutputsRequest
) -> Run:
    """Send the outputs of the tool calls a run asked for."""
    response = transport.request(
        "POST",
        _runs_path(thread_id, "/", run_id, "/submit_tool_outputs"),
        body=request.to_dict(),
        assistants=True,
    )
    return Run.from_dict(response.json(), response.headers)


def cancel_run(transport: Transport, thread_id: str, run_id: str) -> Run:
    """Cancel a run that is in progress."""
    response = transport.request("POST", _runs_path(thread_id, "/", run_id, "/cancel"), assistants=True)
    return Run.from_dict(response.json(), response.headers)


def create_thread_and_run(transport: Transport, request: CreateThreadAndRunRequest) -> Run:
    """Create a thread and start a run on it in one request."""
    response = transport.request("POST", f"{THREADS_PATH}/runs", body=request.to_dict(), assistants=True)
    return Run.from_dict(response.json(), response.headers)


def retrieve_run_step(transport: Transport, thread_id: str, run_id: str, step_id: str) -> RunStep:
    """Fetch one step of a run."""
    response = transport.request(
        "GET", _runs_path(thread_id, "/", run_id, "/steps/", step_id), assistants=True
    )
    return RunStep.from_dict(response.json(), response.headers)


def list_run_steps(transport: Transport, thread_id: str, run_id: str, pagination: Pagination) -> RunStepList:
    """List the steps of a run."""
    response = transport.request(
        "GET", _runs_path(thread_id, "/", run_id, "/steps", pagination.query_string()), assistants=True
    )
    return RunStepList.from_dict(response.json(), response.headers)