import httpx


class RequestRejectedError(httpx.HTTPError):
    """The remote side rejected the request but no response object is available.

    Transports raise the client/server subclasses below; ``status_code`` falls back to
    the class default when the instance carries none.
    """

    status_code: int = 0

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        if status_code:
            self.status_code = status_code
        if request is not None:
            self.request = request
        self.response = response


# =============================================================================
# 4xx
# =============================================================================
class ClientRequestError(RequestRejectedError):
    status_code = 400


# =============================================================================
# 5xx
# =============================================================================
class ServerRequestError(RequestRejectedError):
    status_code = 500
