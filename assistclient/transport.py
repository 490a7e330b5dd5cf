"""HTTP transport, rate-limit headers and pagination for the API client."""

from __future__ import annotations

import io
import json
import re
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, BinaryIO, Callable, Mapping, Optional

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_ASSISTANT_VERSION = "v2"

_UNIT_MICROSECONDS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}
_DURATION_COMPONENT = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"6m0s"``, ``"1.5h"`` or ``"20ms"``.

    Raises ValueError when the text is not a valid duration.
    """
    text = str(text)
    if not text:
        raise ValueError("invalid duration ''")
    rest = text
    negative = rest[0] == "-"
    if rest[0] in "+-":
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(rest):
        match = _DURATION_COMPONENT.match(rest, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += Decimal(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        pos = match.end()

    try:
        result = timedelta(microseconds=int(total))
    except OverflowError as exc:
        raise ValueError(f"invalid duration {text!r}") from exc
    return -result if negative else result


class ResetTime(str):
    """The reset interval of a rate limit, as sent by the server."""

    def duration(self) -> timedelta:
        """The interval as a timedelta; zero when it cannot be parsed."""
        try:
            return parse_duration(str(self))
        except ValueError:
            return timedelta(0)

    def time(self) -> datetime:
        """The local moment at which the limit resets."""
        return datetime.now() + self.duration()


def _header(headers: Optional[Mapping[str, str]], name: str) -> str:
    if headers is None:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return ""


def _to_int(text: str) -> int:
    text = text or ""
    return int(text) if _INTEGER.fullmatch(text) else 0


@dataclass(frozen=True)
class RateLimitHeaders:
    """Rate limits reported in the ``x-ratelimit-*`` response headers."""

    limit_requests: int = 0
    limit_tokens: int = 0
    remaining_requests: int = 0
    remaining_tokens: int = 0
    reset_requests: ResetTime = ResetTime("")
    reset_tokens: ResetTime = ResetTime("")

    @classmethod
    def from_headers(cls, headers: Optional[Mapping[str, str]]) -> "RateLimitHeaders":
        """Read the limits from response headers; unreadable numbers become 0."""
        return cls(
            limit_requests=_to_int(_header(headers, "x-ratelimit-limit-requests")),
            limit_tokens=_to_int(_header(headers, "x-ratelimit-limit-tokens")),
            remaining_requests=_to_int(_header(headers, "x-ratelimit-remaining-requests")),
            remaining_tokens=_to_int(_header(headers, "x-ratelimit-remaining-tokens")),
            reset_requests=ResetTime(_header(headers, "x-ratelimit-reset-requests")),
            reset_tokens=ResetTime(_header(headers, "x-ratelimit-reset-tokens")),
        )


class APIError(Exception):
    """An error reported by the API."""

    def __init__(
        self,
        message: str,
        *,
        type: str = "",
        param: Any = None,
        code: Any = None,
        http_status_code: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = type
        self.param = param
        self.code = code
        self.http_status_code = http_status_code

    def __str__(self) -> str:
        if self.http_status_code:
            return f"status code: {self.http_status_code}, message: {self.message}"
        return self.message

    @classmethod
    def from_payload(cls, payload: Any, http_status_code: int = 0) -> Optional["APIError"]:
        """Build the error from a ``{"error": {...}}`` document, or return None."""
        if not isinstance(payload, dict) or not isinstance(payload.get("error"), dict):
            return None
        detail = payload["error"]
        return cls(
            str(detail.get("message") or ""),
            type=str(detail.get("type") or ""),
            param=detail.get("param"),
            code=detail.get("code"),
            http_status_code=http_status_code,
        )

    @classmethod
    def from_body(cls, body: bytes, http_status_code: int) -> "APIError":
        """Build the error from a failed response body."""
        try:
            error = cls.from_payload(json.loads(body), http_status_code)
        except ValueError:
            error = None
        if error is not None:
            return error
        text = body.decode("utf-8", errors="replace").strip()
        return cls(text or f"HTTP {http_status_code}", http_status_code=http_status_code)


@dataclass
class ApiResponse:
    """A response: its status, headers and body stream."""

    status: int
    headers: Mapping[str, str]
    stream: BinaryIO
    _body: Optional[bytes] = field(default=None, init=False, repr=False)

    def read(self) -> bytes:
        if self._body is None:
            self._body = self.stream.read()
        return self._body

    def json(self) -> Any:
        data = self.read()
        return json.loads(data) if data.strip() else {}

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> "ApiResponse":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def rate_limits(self) -> RateLimitHeaders:
        return RateLimitHeaders.from_headers(self.headers)


@dataclass(frozen=True)
class PreparedRequest:
    """Everything needed to send one request."""

    method: str
    url: str
    headers: dict
    body: Optional[bytes]
    model: str = ""


Sender = Callable[[PreparedRequest], ApiResponse]


class Transport:
    """Builds authenticated requests and sends them."""

    def __init__(
        self,
        auth_token: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        org_id: str = "",
        assistant_version: str = DEFAULT_ASSISTANT_VERSION,
        timeout: Optional[float] = None,
        sender: Optional[Sender] = None,
    ) -> None:
        self.auth_token = auth_token
        self.base_url = base_url
        self.org_id = org_id
        self.assistant_version = assistant_version
        self.timeout = timeout
        self._send = sender or self._send_with_urllib

    def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        model: str = "",
        assistants: bool = False,
        content_type: Optional[str] = None,
        raw: bool = False,
    ) -> ApiResponse:
        """Send a request and return the response.

        Unless ``raw`` is set the body is read in full and the connection
        closed. Raises APIError for an error status.
        """
        headers: dict = {}
        payload: Optional[bytes] = None
        if body is not None:
            payload = bytes(body) if isinstance(body, (bytes, bytearray)) else json.dumps(body).encode("utf-8")
            headers["Content-Type"] = content_type or "application/json"
        elif content_type:
            headers["Content-Type"] = content_type
        headers["Authorization"] = f"Bearer {self.auth_token}"
        if self.org_id:
            headers["OpenAI-Organization"] = self.org_id
        if assistants:
            headers["OpenAI-Beta"] = f"assistants={self.assistant_version}"

        prepared = PreparedRequest(method.upper(), self.base_url + path, headers, payload, model)
        response = self._send(prepared)
        if not 200 <= response.status < 400:
            with response:
                data = response.read()
            raise APIError.from_body(data, response.status)
        if raw:
            return response
        with response:
            data = response.read()
        return ApiResponse(response.status, response.headers, io.BytesIO(data))

    def _send_with_urllib(self, prepared: PreparedRequest) -> ApiResponse:
        request = urllib.request.Request(
            prepared.url, data=prepared.body, headers=prepared.headers, method=prepared.method
        )
        options = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            handle = urllib.request.urlopen(request, **options)
        except urllib.error.HTTPError as exc:
            return ApiResponse(exc.code, exc.headers, exc)
        return ApiResponse(handle.status, handle.headers, handle)


@dataclass(frozen=True)
class Pagination:
    """Cursor parameters for list endpoints."""

    limit: Optional[int] = None
    order: Optional[str] = None
    after: Optional[str] = None
    before: Optional[str] = None

    def query_string(self) -> str:
        """The encoded query, with a leading ``?``, or an empty string."""
        values = {
            "limit": None if self.limit is None else str(self.limit),
            "order": self.order,
            "after": self.after,
            "before": self.before,
        }
        present = sorted((key, value) for key, value in values.items() if value is not None)
        if not present:
            return ""
        return "?" + urllib.parse.urlencode(present)