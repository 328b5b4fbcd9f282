import json
from dataclasses import dataclass, field
from typing import Any

import httpx

Headers = tuple[tuple[str, str], ...]


def _raw_headers(headers: httpx.Headers) -> Headers:
    return tuple(
        (key.decode(headers.encoding), value.decode(headers.encoding)) for key, value in headers.raw
    )


def _request_body(request: httpx.Request) -> bytes:
    try:
        return request.content
    except httpx.RequestNotRead:
        return b""


def group_headers(headers: Headers) -> dict[str, list[str]]:
    """Group header pairs by name, case-insensitively, keeping the first spelling seen."""
    grouped: dict[str, list[str]] = {}
    names: dict[str, str] = {}
    for name, value in headers:
        key = names.setdefault(name.lower(), name)
        grouped.setdefault(key, []).append(value)
    return grouped


def header_line(headers: Headers, name: str) -> str:
    wanted = name.lower()
    return ", ".join(value for key, value in headers if key.lower() == wanted)


@dataclass(frozen=True)
class Request:
    method: str
    url: str
    headers: Headers = ()
    body: bytes = b""
    protocol: str = "HTTP/1.1"
    target: str = "/"

    @classmethod
    def from_httpx(cls, request: httpx.Request, protocol: str = "HTTP/1.1") -> "Request":
        return cls(
            method=request.method,
            url=str(request.url),
            headers=_raw_headers(request.headers),
            body=_request_body(request),
            protocol=protocol,
            target=request.url.raw_path.decode("ascii"),
        )

    def header_map(self) -> dict[str, list[str]]:
        return group_headers(self.headers)

    def header_line(self, name: str) -> str:
        return header_line(self.headers, name)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Response:
    status_code: int
    headers: Headers = ()
    body: bytes = b""
    reason_phrase: str = ""
    http_version: str = "HTTP/1.1"

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "Response":
        return cls(
            status_code=response.status_code,
            headers=_raw_headers(response.headers),
            body=response.content,
            reason_phrase=response.reason_phrase,
            http_version=response.http_version,
        )

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_length(self) -> int:
        """Content-Length header when present and non-empty, else the body size in bytes."""
        value = self.header_line("Content-Length").split(",")[0].strip()
        if value:
            try:
                return int(value)
            except ValueError:
                pass
        return len(self.body)

    def header_map(self) -> dict[str, list[str]]:
        return group_headers(self.headers)

    def header_line(self, name: str) -> str:
        return header_line(self.headers, name)

    def json(self) -> Any:
        return json.loads(self.body)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Transaction:
    request: Request
    response: Response
    duration: float | None = None
    # URL of the first hop of the chain this transaction belongs to
    origin: str = ""

    @classmethod
    def from_httpx(
        cls, response: httpx.Response, duration: float | None = None, origin: str | None = None
    ) -> "Transaction":
        request = Request.from_httpx(response.request, protocol=response.http_version)
        return cls(
            request=request,
            response=Response.from_httpx(response),
            duration=duration,
            origin=origin or request.url,
        )


@dataclass
class CallContext:
    """Per-call state carried through the httpx request extensions, redirect hops included."""

    call_id: str
    hops: list[str] = field(default_factory=list)
    # perf_counter() when the current hop was sent; hops of one call run one after another
    hop_started: float | None = None

    @property
    def origin(self) -> str | None:
        return self.hops[0] if self.hops else None
