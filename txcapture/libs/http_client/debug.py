import io
from typing import Any


class DebugStream:
    """In-memory sink for the httpx ``trace`` request extension.

    httpcore calls the instance with ``(event_name, info)`` for each connection and
    transfer step (connect, TLS, send headers/body, receive headers/body, close). The
    extension is copied onto redirect requests, so one stream covers a whole chain.
    Use it as a context manager; the buffer is released on exit and cannot be read after.
    """

    def __init__(self) -> None:
        self._buffer = io.StringIO()

    def __call__(self, event_name: str, info: dict[str, Any]) -> None:
        self.write(_format_event(event_name, info))

    def write(self, line: str) -> None:
        if not self._buffer.closed:
            self._buffer.write(line if line.endswith("\n") else line + "\n")

    @property
    def closed(self) -> bool:
        return self._buffer.closed

    def read(self) -> str:
        return self._buffer.getvalue()

    def close(self) -> None:
        self._buffer.close()

    def __enter__(self) -> "DebugStream":
        return self

    def __exit__(self, *_args: Any) -> None:
        self.close()


def _format_event(event_name: str, info: dict[str, Any]) -> str:
    if event_name.endswith(".complete") and "return_value" in info:
        value = info["return_value"]
        # receive_response_headers returns (http_version, status, reason, headers)
        if isinstance(value, tuple) and len(value) == 4:
            http_version, status, reason, headers = value
            lines = [f"< {_text(http_version)} {status} {_text(reason)}"]
            lines.extend(f"< {_text(k)}: {_text(v)}" for k, v in headers)
            return "\n".join(lines)
        return f"* {event_name}"
    if event_name.endswith(".failed") and "exception" in info:
        return f"* {event_name} {info['exception']!r}"
    details = " ".join(f"{key}={value!r}" for key, value in info.items())
    return f"* {event_name} {details}".rstrip()


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)
