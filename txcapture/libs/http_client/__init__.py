"""Transaction-capturing HTTP client."""

from .client import CALL_EXTENSION, TransactionClient, make_transaction_request
from .config import ClientConfig, RequestOptions
from .debug import DebugStream
from .errors import FailureKind, classify_exception, map_exception_to_response
from .history import TransactionHistory
from .middleware import headers_middleware, logging_middleware, timeout_middleware
from .models import CallContext, Request, Response, Transaction
from .output import format_output, print_output
from .pool import PoolLimits, ProxyConfig
from .types import HistoryObserver, Middleware, NextFn, RequestFactory, TransportFactory

__all__ = [
    "CALL_EXTENSION",
    "TransactionClient",
    "make_transaction_request",
    "ClientConfig",
    "RequestOptions",
    "DebugStream",
    "FailureKind",
    "classify_exception",
    "map_exception_to_response",
    "TransactionHistory",
    "CallContext",
    "Request",
    "Response",
    "Transaction",
    "format_output",
    "print_output",
    "PoolLimits",
    "ProxyConfig",
    "HistoryObserver",
    "Middleware",
    "NextFn",
    "RequestFactory",
    "TransportFactory",
    "headers_middleware",
    "logging_middleware",
    "timeout_middleware",
]
