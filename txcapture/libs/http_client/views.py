"""Read-only projections over recorded transactions.

Output shape of one transaction (stable contract, a flat mapping)::

    {
        "request": {"method", "url", "headers", "body", "protocol", "target"},
        "response": {"statusCode", "headers", "body", "contentLength", "reasonPhrase"},
        "duration": float | None,
        "debug": str | None,
    }

``headers`` is a JSON object string mapping each header name to the list of its values.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from .models import Transaction

SUMMARY_COLUMNS = (
    "requestMethod",
    "requestUrl",
    "requestProtocol",
    "requestTarget",
    "responseStatusCode",
    "responseContentLength",
    "responseReasonPhrase",
)


def encode_headers(headers: Mapping[str, list[str]]) -> str:
    return json.dumps(headers)


def transaction_output(transaction: Transaction, debug: Mapping[str, str] | None = None) -> dict[str, Any]:
    request = transaction.request
    response = transaction.response
    return {
        "request": {
            "method": request.method,
            "url": request.url,
            "headers": encode_headers(request.header_map()),
            "body": request.text(),
            "protocol": request.protocol,
            "target": request.target,
        },
        "response": {
            "statusCode": response.status_code,
            "headers": encode_headers(response.header_map()),
            "body": response.text(),
            "contentLength": response.content_length,
            "reasonPhrase": response.reason_phrase,
        },
        "duration": transaction.duration,
        "debug": (debug or {}).get(transaction.origin),
    }


def last_transaction(
    transactions: list[Transaction], debug: Mapping[str, str] | None = None
) -> dict[str, Any]:
    if not transactions:
        return {}
    return transaction_output(transactions[-1], debug)


def all_transactions(
    transactions: Iterable[Transaction], debug: Mapping[str, str] | None = None
) -> list[dict[str, Any]]:
    return [transaction_output(transaction, debug) for transaction in transactions]


def transaction_summary(transactions: Iterable[Transaction]) -> dict[str, list[Any]]:
    summary: dict[str, list[Any]] = {column: [] for column in SUMMARY_COLUMNS}
    for transaction in transactions:
        request = transaction.request
        response = transaction.response
        summary["requestMethod"].append(request.method)
        summary["requestUrl"].append(request.url)
        summary["requestProtocol"].append(request.protocol)
        summary["requestTarget"].append(request.target)
        summary["responseStatusCode"].append(response.status_code)
        summary["responseContentLength"].append(response.content_length)
        summary["responseReasonPhrase"].append(response.reason_phrase)
    return summary
