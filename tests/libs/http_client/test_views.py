import json

from txcapture.libs.http_client.models import Request, Response, Transaction
from txcapture.libs.http_client.views import (
    SUMMARY_COLUMNS,
    all_transactions,
    last_transaction,
    transaction_output,
    transaction_summary,
)


def make_transaction(url: str, status_code: int, origin: str = "") -> Transaction:
    return Transaction(
        request=Request(
            method="GET",
            url=url,
            headers=(("Accept", "*/*"), ("X-Multi", "a"), ("x-multi", "b")),
            target="/" + url.rsplit("/", 1)[-1],
        ),
        response=Response(
            status_code=status_code,
            headers=(("Content-Type", "text/plain"),),
            body=b"hello",
            reason_phrase="OK" if status_code == 200 else "Found",
        ),
        duration=0.5,
        origin=origin or url,
    )


class TestTransactionOutput:
    def test_shape(self):
        output = transaction_output(make_transaction("https://example.com/a", 200))

        assert set(output) == {"request", "response", "duration", "debug"}
        assert set(output["request"]) == {"method", "url", "headers", "body", "protocol", "target"}
        assert set(output["response"]) == {
            "statusCode",
            "headers",
            "body",
            "contentLength",
            "reasonPhrase",
        }
        assert output["response"]["body"] == "hello"
        assert output["response"]["contentLength"] == 5
        assert output["duration"] == 0.5
        assert output["debug"] is None

    def test_headers_grouped_as_json(self):
        output = transaction_output(make_transaction("https://example.com/a", 200))
        assert json.loads(output["request"]["headers"]) == {"Accept": ["*/*"], "X-Multi": ["a", "b"]}

    def test_debug_looked_up_by_origin(self):
        transaction = make_transaction("https://example.com/b", 200, origin="https://example.com/a")
        output = transaction_output(transaction, {"https://example.com/a": "* trace"})
        assert output["debug"] == "* trace"


class TestCollections:
    def test_last_transaction(self):
        transactions = [
            make_transaction("https://example.com/a", 302),
            make_transaction("https://example.com/b", 200),
        ]
        assert last_transaction(transactions)["request"]["url"] == "https://example.com/b"
        assert last_transaction([]) == {}

    def test_all_transactions_order(self):
        transactions = [
            make_transaction("https://example.com/a", 302),
            make_transaction("https://example.com/b", 200),
        ]
        outputs = all_transactions(transactions)
        assert [o["request"]["url"] for o in outputs] == ["https://example.com/a", "https://example.com/b"]
        assert all_transactions([]) == []

    def test_summary(self):
        transactions = [
            make_transaction("https://example.com/a", 302),
            make_transaction("https://example.com/b", 200),
        ]
        summary = transaction_summary(transactions)

        assert tuple(summary) == SUMMARY_COLUMNS
        assert summary["requestUrl"] == ["https://example.com/a", "https://example.com/b"]
        assert summary["requestTarget"] == ["/a", "/b"]
        assert summary["responseStatusCode"] == [302, 200]
        assert summary["responseContentLength"] == [5, 5]
        assert summary["responseReasonPhrase"] == ["Found", "OK"]

    def test_empty_summary(self):
        assert transaction_summary([]) == {column: [] for column in SUMMARY_COLUMNS}
