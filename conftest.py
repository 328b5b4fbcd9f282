"""Pytest configuration"""

import json
import re

import httpx
import pytest

from txcapture import TransactionClient


class DevServer:
    """In-process stand-in for the development server used to exercise the client.

    Routes:
      /api/test        basic 200 JSON
      /api/echo        echoes method, headers, query and body
      /redirect/{n}    302 to /redirect/{n-1} until n-1 reaches 0, then 200
      /error/{code}    JSON error response with that status (400-599)
      /timeout         raises httpx.ConnectTimeout
    Every handled request is written to the ``trace`` extension when one is attached,
    the way httpcore reports connection events.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        trace = request.extensions.get("trace")
        if trace is not None:
            trace("mock.send_request", {"method": request.method, "url": str(request.url)})

        response = self.route(request)

        if trace is not None:
            trace("mock.receive_response", {"status": response.status_code})
        return response

    def route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path == "/api/test":
            return httpx.Response(200, json={"status": "ok", "message": "Basic test endpoint"})

        if path == "/api/echo":
            return httpx.Response(
                200,
                json={
                    "status": "ok",
                    "method": request.method,
                    "headers": dict(request.headers),
                    "query": dict(request.url.params),
                    "body": request.content.decode("utf-8"),
                },
            )

        match = re.fullmatch(r"/redirect/(\d+)", path)
        if match:
            next_count = int(match.group(1)) - 1
            if next_count > 0:
                return httpx.Response(302, headers={"Location": f"/redirect/{next_count}"})
            return httpx.Response(200, json={"status": "ok", "message": "Redirect chain completed"})

        match = re.fullmatch(r"/error/(\d+)", path)
        if match:
            code = int(match.group(1))
            if 400 <= code < 600:
                return httpx.Response(
                    code,
                    content=json.dumps(
                        {"status": "error", "code": code, "message": f"Error response with code {code}"}
                    ),
                    headers={"Content-Type": "application/json"},
                )
            return httpx.Response(400, json={"status": "error", "message": "Invalid error code"})

        if path == "/timeout":
            raise httpx.ConnectTimeout("Connection timed out", request=request)

        return httpx.Response(404, json={"status": "error", "message": "Not found"})


@pytest.fixture
def dev_server():
    return DevServer()


@pytest.fixture
def make_client(dev_server):
    """Build TransactionClients wired to the dev server; closed after the test."""
    clients: list[TransactionClient] = []

    def factory(config=None, logger=None, proxy_config=None):
        merged = {"transport_factory": lambda: httpx.MockTransport(dev_server)}
        merged.update(config or {})
        client = TransactionClient(merged, logger, proxy_config)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()
