import logging

import httpx

from .types import Middleware, NextFn


def timeout_middleware(timeout: float) -> Middleware:
    def middleware(request: httpx.Request, next: NextFn) -> httpx.Response:
        request.extensions = {**request.extensions, "timeout": httpx.Timeout(timeout).as_dict()}
        return next(request)

    return middleware


def logging_middleware(logger: logging.Logger | None = None) -> Middleware:
    log = logger or logging.getLogger(__name__)

    def middleware(request: httpx.Request, next: NextFn) -> httpx.Response:
        log.info(f"-> {request.method} {request.url}")
        response = next(request)
        log.info(f"<- {response.status_code} {response.reason_phrase}")
        return response

    return middleware


def headers_middleware(**headers: str) -> Middleware:
    """Set headers on every request; keyword underscores become dashes (``X_Api_Key``)."""

    def middleware(request: httpx.Request, next: NextFn) -> httpx.Response:
        for name, value in headers.items():
            request.headers[name.replace("_", "-")] = value
        return next(request)

    return middleware


def chain(middlewares: list[Middleware], send: NextFn) -> NextFn:
    """Wrap ``send`` so ``middlewares[0]`` runs outermost."""

    def dispatch(index: int, request: httpx.Request) -> httpx.Response:
        if index >= len(middlewares):
            return send(request)

        def next_fn(req: httpx.Request) -> httpx.Response:
            return dispatch(index + 1, req)

        return middlewares[index](request, next_fn)

    return lambda request: dispatch(0, request)
