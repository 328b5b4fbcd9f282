import html
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

FALLBACK = "(N/A)"
TRUNCATED = "... [TRUNCATED]"


def _truncate(text: str, truncate: bool, max_length: int) -> str:
    if truncate and len(text) > max_length:
        return text[:max_length] + TRUNCATED
    return text


def _pretty_headers(encoded: str) -> str:
    try:
        return json.dumps(json.loads(encoded), indent=4)
    except ValueError:
        return encoded


def _format_transaction(
    transaction: Mapping[str, Any], truncate: bool, max_length: int, divider: str
) -> list[str]:
    request = transaction.get("request") or {}
    response = transaction.get("response") or {}
    lines = ["Request:", divider]
    lines.append(f"  Method: {request.get('method') or FALLBACK}")
    lines.append(f"  URL: {request.get('url') or FALLBACK}")
    lines.append(divider)
    if request.get("headers"):
        lines += ["  Headers:", divider, _pretty_headers(request["headers"])]
    lines.append(divider)
    if request.get("body"):
        lines += ["  Body:", divider, _truncate(request["body"], truncate, max_length)]
    lines.append(divider)

    lines += ["Response:", divider]
    lines.append(f"  Status Code: {response.get('statusCode') or FALLBACK}")
    lines.append(divider)
    if response.get("headers"):
        lines += ["  Headers:", divider, _pretty_headers(response["headers"])]
    lines.append(divider)
    if response.get("body"):
        lines += ["  Body:", divider, _truncate(response["body"], truncate, max_length)]
    lines.append(divider)

    if transaction.get("debug") is not None:
        lines += ["Debug Info:", divider, _truncate(transaction["debug"], truncate, max_length), divider]
    return lines


def format_output(
    output: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    truncate: bool = True,
    max_length: int = 1000,
    escape: bool = True,
    divider: str | None = None,
) -> str:
    """Render view output (one transaction mapping or a list of them) as readable text."""
    if divider is None:
        divider = "-" * 50
    transactions = [output] if isinstance(output, Mapping) else list(output)
    transactions = [transaction for transaction in transactions if transaction]

    lines: list[str] = []
    for index, transaction in enumerate(transactions, start=1):
        lines += _format_transaction(transaction, truncate, max_length, divider)
        if index < len(transactions):
            lines += [divider, ""]

    text = "\n".join(lines).strip()
    return html.escape(text) if escape else text


def print_output(
    output: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    truncate: bool = True,
    max_length: int = 1000,
    escape: bool = True,
    divider: str | None = None,
    logger: logging.Logger | None = None,
) -> None:
    text = format_output(output, truncate, max_length, escape, divider)
    if logger is None:
        print(text)
    else:
        logger.info("Request/Response Details:", extra={"output": text})
