import json
from enum import StrEnum

import httpx

from txcapture.exceptions import ClientRequestError, ServerRequestError

# The classified set; anything outside it propagates to the caller.
HANDLED_EXCEPTIONS: tuple[type[BaseException], ...] = (httpx.HTTPError,)

CONNECTION_FAILURES: tuple[type[BaseException], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.ProxyError,
)


class FailureKind(StrEnum):
    ATTACHED_RESPONSE = "attached_response"
    CONNECTION = "connection"
    CLIENT = "client"
    SERVER = "server"
    GENERIC = "generic"


def attached_response(exc: BaseException) -> httpx.Response | None:
    response = getattr(exc, "response", None)
    return response if isinstance(response, httpx.Response) else None


def attached_request(exc: BaseException) -> httpx.Request | None:
    try:
        request = getattr(exc, "request", None)
    except RuntimeError:
        # httpx.HTTPError.request raises until the request is bound
        return None
    return request if isinstance(request, httpx.Request) else None


def classify_exception(exc: BaseException) -> FailureKind:
    if attached_response(exc) is not None:
        return FailureKind.ATTACHED_RESPONSE
    if isinstance(exc, CONNECTION_FAILURES):
        return FailureKind.CONNECTION
    if isinstance(exc, ClientRequestError):
        return FailureKind.CLIENT
    if isinstance(exc, ServerRequestError):
        return FailureKind.SERVER
    return FailureKind.GENERIC


def status_for(exc: BaseException, kind: FailureKind) -> int:
    if kind is FailureKind.ATTACHED_RESPONSE:
        return attached_response(exc).status_code  # type: ignore[union-attr]
    if kind is FailureKind.CONNECTION:
        return 408
    if kind is FailureKind.CLIENT:
        return getattr(exc, "status_code", 0) or 400
    if kind is FailureKind.SERVER:
        return getattr(exc, "status_code", 0) or 500
    return 500


def synthetic_response(
    status_code: int, message: str, request: httpx.Request | None = None
) -> httpx.Response:
    """Error response with a JSON body and no headers at all.

    Passing ``content=`` would make httpx add a Content-Length header, so the body goes
    in as a raw byte stream.
    """
    body = json.dumps({"error": message}).encode("utf-8")
    response = httpx.Response(status_code, stream=httpx.ByteStream(body), request=request)
    response.read()
    return response


def map_exception_to_response(exc: BaseException) -> httpx.Response:
    kind = classify_exception(exc)
    if kind is FailureKind.ATTACHED_RESPONSE:
        return attached_response(exc)  # type: ignore[return-value]
    return synthetic_response(status_for(exc, kind), str(exc), attached_request(exc))
