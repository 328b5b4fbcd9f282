import logging

from txcapture.libs.http_client import (
    ClientConfig,
    TransactionClient,
    TransactionHistory,
    format_output,
    make_transaction_request,
    print_output,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "TransactionClient",
    "TransactionHistory",
    "format_output",
    "make_transaction_request",
    "print_output",
]
