"""Reader for server-sent event streams of JSON messages."""

from __future__ import annotations

import json
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

from assistclient.transport import APIError

HEADER_DATA = b"data: "
ERROR_PREFIX = b'data: {"error":'
DEFAULT_EMPTY_MESSAGES_LIMIT = 300

T = TypeVar("T")


class TooManyEmptyStreamMessagesError(Exception):
    """The stream sent more non-data lines in a row than allowed."""

    def __init__(self) -> None:
        super().__init__("stream has sent too many empty messages")


class StreamAPIError(APIError):
    """An error document the server sent inside the stream."""

    def __str__(self) -> str:
        return f"error, {super().__str__()}"


class StreamReader(Generic[T]):
    """Reads ``data:`` lines from an event stream and decodes them.

    ``recv`` and ``recv_raw`` raise EOFError once the stream has ended.
    """

    def __init__(
        self,
        lines: Iterable[bytes],
        decode: Callable[[bytes], T] = json.loads,
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        on_close: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._lines = iter(lines)
        self._decode = decode
        self._empty_messages_limit = empty_messages_limit
        self._on_close = on_close
        self._errors = bytearray()
        self._finished = False

    def _next_line(self) -> Optional[bytes]:
        line = next(self._lines, None)
        if line is None:
            return None
        if isinstance(line, str):
            line = line.encode("utf-8")
        # A last line without its newline is dropped, as at end of input.
        if not line.endswith(b"\n"):
            return None
        return line

    def _unmarshal_error(self) -> Optional[StreamAPIError]:
        if not self._errors:
            return None
        try:
            payload = json.loads(bytes(self._errors))
        except ValueError:
            return None
        return StreamAPIError.from_payload(payload)

    def recv_raw(self) -> bytes:
        """Return the payload of the next data line."""
        if self._finished:
            raise EOFError("stream finished")

        empty_messages = 0
        has_error_prefix = False
        while True:
            line = self._next_line()
            if line is None or has_error_prefix:
                error = self._unmarshal_error()
                if error is not None:
                    raise error
                if line is None:
                    raise EOFError("stream ended")
                return b""

            stripped = line.strip()
            if stripped.startswith(ERROR_PREFIX):
                has_error_prefix = True
            if not stripped.startswith(HEADER_DATA) or has_error_prefix:
                if has_error_prefix:
                    stripped = stripped[len(HEADER_DATA):]
                self._errors.extend(stripped)
                empty_messages += 1
                if empty_messages > self._empty_messages_limit:
                    raise TooManyEmptyStreamMessagesError()
                continue

            payload = stripped[len(HEADER_DATA):]
            if payload == b"[DONE]":
                self._finished = True
                raise EOFError("stream finished")
            return payload

    def recv(self) -> T:
        """Decode and return the next message."""
        return self._decode(self.recv_raw())

    def close(self) -> None:
        if self._on_close is not None:
            self._on_close()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except EOFError:
                return

    def __enter__(self) -> "StreamReader[T]":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()