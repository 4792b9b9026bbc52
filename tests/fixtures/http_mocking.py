# === NAVMAP v1 ===
# {
#   "module": "tests.fixtures.http_mocking",
#   "purpose": "HTTP mocking fixtures for hermetic client testing",
#   "sections": [
#     {"id": "mock-response-builder", "name": "MockResponseBuilder", "anchor": "class-mock-response-builder", "kind": "class"},
#     {"id": "mock-api", "name": "MockApi", "anchor": "class-mock-api", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""
HTTP mocking fixtures for hermetic client testing.

Provides an HTTPX MockTransport backed recorder and a fluent response builder
so client behaviour can be exercised without real network access. Every
request is recorded; responses are rebuilt per request.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Union
from urllib.parse import parse_qsl

import httpx


class MockResponseBuilder:
    """Builder for constructing mock HTTP responses with fluent API."""

    def __init__(self, status_code: int = 200, content: bytes = b""):
        """Initialize response builder with defaults."""
        self.status_code = status_code
        self.content = content
        self.headers: list[tuple[str, str]] = []

    def with_status(self, code: int) -> MockResponseBuilder:
        self.status_code = code
        return self

    def with_content(self, content: bytes | str) -> MockResponseBuilder:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.content = content
        return self

    def with_json(self, data: Any) -> MockResponseBuilder:
        """Set response content as JSON."""
        self.content = json.dumps(data).encode("utf-8")
        self.headers.append(("content-type", "application/json"))
        return self

    def with_header(self, name: str, value: str) -> MockResponseBuilder:
        self.headers.append((name, value))
        return self

    def with_cookie(self, name: str, value: str) -> MockResponseBuilder:
        """Add a ``Set-Cookie`` header carrying attributes like a real server."""
        self.headers.append(("set-cookie", f"{name}={value}; Path=/; HttpOnly"))
        return self

    def build(self) -> httpx.Response:
        return httpx.Response(
            status_code=self.status_code,
            content=self.content,
            headers=self.headers,
        )


Responder = Union[MockResponseBuilder, Callable[[httpx.Request], httpx.Response]]


class MockApi:
    """Route table plus request log behind an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, str, Responder]] = []
        self.requests: list[httpx.Request] = []

    def register(self, method: str, url_prefix: str, responder: Responder) -> None:
        """Register a responder; later registrations take priority."""
        self.routes.insert(0, (method.upper(), url_prefix, responder))

    def json(self, method: str, url_prefix: str, data: Any, status_code: int = 200) -> None:
        self.register(method, url_prefix, MockResponseBuilder(status_code).with_json(data))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        for method, prefix, responder in self.routes:
            if method == request.method and str(request.url).startswith(prefix):
                if isinstance(responder, MockResponseBuilder):
                    return responder.build()
                return responder(request)
        return httpx.Response(404, json={"error": "Not mocked"})

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def form_fields(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    return dict(parse_qsl(request.content.decode("utf-8"), keep_blank_values=True))
