import json
import logging
import threading
import time
from collections.abc import Mapping
from typing import Any

import httpx

from txcapture.extensions.ext_logging import trace_id_generator, trace_id_var
from txcapture.libs.helper import default_config, default_options, merge_recursive_distinct

from .config import ClientConfig, RequestOptions
from .debug import DebugStream
from .errors import (
    HANDLED_EXCEPTIONS,
    attached_request,
    attached_response,
    classify_exception,
    map_exception_to_response,
)
from .history import TransactionHistory
from .middleware import chain
from .models import CallContext, Transaction
from .output import print_output
from .views import all_transactions, last_transaction, transaction_summary

# Request extension carrying the CallContext; httpx copies extensions onto redirect requests.
CALL_EXTENSION = "txcapture.call"


class TransactionClient:
    """httpx client wrapper that records every request/response pair it sees.

    Each hop of a redirect chain is appended to the history by a response event hook.
    Transport failures never escape ``make_request``: they come back as a response,
    either the one attached to the exception or a synthetic JSON error response.

    Usage::

        client = TransactionClient()
        response = client.make_request("GET", "https://api.example.com/data")
        print(client.get_last_transaction()["response"]["statusCode"])
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        logger: logging.Logger | None = None,
        proxy_config: Mapping[str, Any] | None = None,
    ):
        self._logger = logger or logging.getLogger(__name__)
        self._debug: dict[str, str] = {}
        self._debug_lock = threading.Lock()
        self._history = TransactionHistory()

        self._config = ClientConfig.merged(config, proxy_config)
        if self._config.history is not None:
            self._history = self._config.history
        self._client = self._build_client(self._config)

        self._logger.debug(
            "TransactionClient initialized",
            extra={"client_config": self._config.describe()},
        )

    def _build_client(self, config: ClientConfig) -> httpx.Client:
        return httpx.Client(
            event_hooks={"request": [self._start_hop], "response": [self._record_transaction]},
            **config.httpx_kwargs(),
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def history(self) -> TransactionHistory:
        return self._history

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TransactionClient":
        return self

    def __exit__(self, *_args: Any) -> None:
        self.close()

    def get_container(self) -> list[Transaction]:
        return self._history.snapshot()

    def get_debug(self) -> dict[str, str]:
        with self._debug_lock:
            return dict(self._debug)

    def _start_hop(self, request: httpx.Request) -> None:
        context = request.extensions.get(CALL_EXTENSION)
        if isinstance(context, CallContext):
            context.hop_started = time.perf_counter()

    def _record_transaction(self, response: httpx.Response) -> None:
        # Read before snapshotting; httpx returns the cached body on later reads.
        response.read()
        url = str(response.request.url)
        origin = url
        duration = None
        context = response.request.extensions.get(CALL_EXTENSION)
        if isinstance(context, CallContext):
            context.hops.append(url)
            origin = context.origin
            if context.hop_started is not None:
                duration = time.perf_counter() - context.hop_started

        self._history.append(Transaction.from_httpx(response, duration=duration, origin=origin))
        self._logger.debug(
            f"Transaction recorded: {response.request.method} {url} -> {response.status_code}",
            extra={"duration": duration},
        )

    def _capture_debug_info(
        self, debug_stream: DebugStream, uri: str, context: CallContext | None = None
    ) -> None:
        """Store the call's trace output under the URL of the first hop of its chain."""
        key = (context.origin if context is not None else None) or uri
        with debug_stream:
            if debug_stream.closed:
                self._logger.warning(f"Invalid debug stream for URI: {uri}")
                return
            content = debug_stream.read()
            if not content:
                self._logger.warning(f"Failed to read debug stream for URI: {uri}")
                return
            with self._debug_lock:
                self._debug[key] = content
            self._logger.info(f"Debug info captured for URI: {key}", extra={"debug_length": len(content)})

    def create_request(
        self, method: str, uri: str = "", options: Mapping[str, Any] | None = None
    ) -> httpx.Request:
        return self._create_request(method, uri, RequestOptions.parse(options))

    def _create_request(
        self,
        method: str,
        uri: str,
        options: RequestOptions,
        extensions: dict[str, Any] | None = None,
    ) -> httpx.Request:
        headers = options.header_pairs()
        content = options.body
        if content is None and options.json_body is not None:
            content = json.dumps(options.json_body).encode("utf-8")
            if not any(name.lower() == "content-type" for name, _ in headers):
                headers.append(("Content-Type", "application/json"))

        timeout = (
            httpx.Timeout(options.timeout, connect=self._config.connect_timeout)
            if options.timeout is not None
            else self._client.timeout
        )
        extensions = {"timeout": timeout.as_dict(), **(extensions or {})}

        factory = self._config.request_factory or self._client.build_request
        request = factory(
            method,
            uri,
            headers=headers or None,
            content=content,
            params=options.query,
            extensions=extensions,
        )

        self._logger.info(
            "Request created",
            extra={"method": method, "uri": uri, "options": options.loggable()},
        )
        return request

    def send(self, request: httpx.Request, **kwargs: Any) -> httpx.Response:
        """Dispatch a prepared request through the middlewares; exceptions propagate."""
        if CALL_EXTENSION not in request.extensions:
            request.extensions = {
                **request.extensions,
                CALL_EXTENSION: CallContext(call_id=trace_id_var.get() or trace_id_generator()),
            }
        send = chain(self._config.middlewares, lambda req: self._client.send(req, **kwargs))
        return send(request)

    def make_request(
        self, method: str, uri: str = "", options: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        """Send a request and return its response; classified failures return a response too."""
        parsed = RequestOptions.parse(options)
        token = trace_id_var.set(trace_id_generator())
        try:
            return self._make_request(method, uri, parsed)
        finally:
            trace_id_var.reset(token)

    def _make_request(self, method: str, uri: str, options: RequestOptions) -> httpx.Response:
        self._logger.info("Starting request", extra={"method": method, "uri": uri})

        context = CallContext(call_id=trace_id_var.get() or trace_id_generator())
        capture_debug = self._config.debug if options.debug is None else options.debug
        debug_stream = DebugStream() if capture_debug else None
        extensions: dict[str, Any] = {CALL_EXTENSION: context}
        if debug_stream is not None:
            extensions["trace"] = debug_stream

        request_uri = uri
        start_time = time.perf_counter()
        try:
            request = self._create_request(method, uri, options, extensions)
            request_uri = str(request.url)
            try:
                response = self._dispatch(request, options)
                self._log_response(method, uri, response)
            except HANDLED_EXCEPTIONS as e:
                response = self._handle_exception(e)
        finally:
            duration = time.perf_counter() - start_time
            if debug_stream is not None:
                self._capture_debug_info(debug_stream, request_uri, context)

        self._logger.info(
            "Request completed",
            extra={"method": method, "uri": uri, "duration": duration, "hops": len(context.hops)},
        )
        return response

    def _dispatch(self, request: httpx.Request, options: RequestOptions) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if options.follow_redirects is not None:
            kwargs["follow_redirects"] = options.follow_redirects
        response = self.send(request, **kwargs)

        http_errors = self._config.http_errors if options.http_errors is None else options.http_errors
        if http_errors and response.is_error:
            response.raise_for_status()
        return response

    def _log_response(self, method: str, uri: str, response: httpx.Response) -> None:
        if response.is_success:
            self._logger.info(
                "Request successful",
                extra={"method": method, "uri": uri, "status_code": response.status_code},
            )
        else:
            self._logger.error(
                "Non-successful response",
                extra={
                    "method": method,
                    "uri": uri,
                    "status_code": response.status_code,
                    "response_body": response.text,
                },
            )

    def _handle_exception(self, exc: Exception) -> httpx.Response:
        kind = classify_exception(exc)
        context: dict[str, Any] = {
            "exception": type(exc).__name__,
            "kind": kind.value,
            "error_message": str(exc),
        }
        request = attached_request(exc)
        if request is not None:
            context["request"] = f"{request.method} {request.url}"
        response = attached_response(exc)
        if response is not None:
            context["status_code"] = response.status_code

        self._logger.error(f"Request failed: {type(exc).__name__}: {exc}", extra=context)
        return map_exception_to_response(exc)

    def get_last_transaction(self) -> dict[str, Any]:
        """Most recent hop as a flat mapping, or ``{}`` when nothing has been recorded."""
        self._logger.info("Retrieving last transaction")
        output = last_transaction(self.get_container(), self.get_debug())
        if output:
            self._logger.info(
                "Last transaction retrieved",
                extra={
                    "transaction_count": len(self._history),
                    "latest_status_code": output["response"]["statusCode"],
                },
            )
        else:
            self._logger.info("No transactions available")
        return output

    def get_all_transactions(self) -> list[dict[str, Any]]:
        self._logger.info("Retrieving all transactions")
        return all_transactions(self.get_container(), self.get_debug())

    def get_transaction_summary(self) -> dict[str, list[Any]]:
        self._logger.info("Retrieving transaction summary")
        return transaction_summary(self.get_container())

    def print_last_transaction(
        self,
        truncate: bool = True,
        max_length: int = 1000,
        escape: bool = True,
        divider: str | None = None,
        use_logger: bool = True,
    ) -> None:
        print_output(
            self.get_last_transaction(),
            truncate,
            max_length,
            escape,
            divider,
            self._logger if use_logger else None,
        )

    def print_all_transactions(
        self,
        truncate: bool = True,
        max_length: int = 1000,
        escape: bool = True,
        divider: str | None = None,
        use_logger: bool = True,
    ) -> None:
        print_output(
            self.get_all_transactions(),
            truncate,
            max_length,
            escape,
            divider,
            self._logger if use_logger else None,
        )

    def reset(self, config: Mapping[str, Any] | None = None) -> None:
        """Clear history and debug telemetry and rebuild the transport.

        Without a new shared history in ``config`` the current history is truncated in
        place, so every holder of the handle sees it empty. With one, the client switches
        to it untouched.
        """
        new_config = ClientConfig.merged(config) if config is not None else self._config
        if config is not None and new_config.history is not None:
            self._history = new_config.history
        else:
            self._history.clear()

        with self._debug_lock:
            self._debug.clear()

        previous = self._client
        self._config = new_config
        self._client = self._build_client(new_config)
        previous.close()

        self._logger.info("TransactionClient reset", extra={"client_config": new_config.describe()})


def make_transaction_request(
    method: str,
    uri: str,
    config: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
    logger: logging.Logger | None = None,
    rotate_user_agent: bool = False,
) -> dict[str, Any]:
    """One-shot call with browser-like default headers; returns the last transaction view."""
    config = merge_recursive_distinct(default_config(), config)
    options = merge_recursive_distinct(default_options(rotate_user_agent), options)

    with TransactionClient(config, logger) as client:
        client.make_request(method, uri, options)
        return client.get_last_transaction()
