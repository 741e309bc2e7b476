r"""Shared test helpers.

This module contains an in-memory HTTP server, served through
``httpx.MockTransport``, that records every request it receives.
"""

from __future__ import annotations

__all__ = ["TEST_URL", "DripStream", "FakeServer"]

import time
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterator

TEST_URL = "https://api.example.com"


class FakeServer:
    """In-memory HTTP server recording the requests it receives.

    Routes:
        ``/status/{code}``: respond with ``code`` and body ``"{code}"``.
        ``/fail-then-ok?failures=K``: respond 500 to the first ``K``
            requests, then 200. Bodies name the request number.
        ``/echo``: respond 200 with the request body, or with the
            ``body`` query parameter for GET and HEAD.
        ``/headers``: respond 200 with the request headers as JSON.
        ``/json``: respond 200 with a JSON document.
        ``/connect-error``: fail with ``httpx.ConnectError``.
        ``/timeout``: fail with ``httpx.ReadTimeout``.
        ``/corrupt-gzip``: respond 200 with a gzip header and a body that
            is not gzip.
        ``/drip?chunks=N&delay=D``: respond 200 with ``N`` one-byte chunks,
            waiting ``D`` seconds before each.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    @property
    def request_count(self) -> int:
        return len(self.requests)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/status/"):
            code = int(path.removeprefix("/status/"))
            return httpx.Response(code, text=str(code))
        if path == "/fail-then-ok":
            failures = int(request.url.params.get("failures", "0"))
            if self.request_count > failures:
                return httpx.Response(200, text=f"200 on request {self.request_count}")
            return httpx.Response(500, text=f"500 on request {self.request_count}")
        if path == "/echo":
            if request.method in ("GET", "HEAD"):
                return httpx.Response(200, text=request.url.params.get("body", ""))
            return httpx.Response(200, content=request.content)
        if path == "/headers":
            return httpx.Response(200, json=dict(request.headers))
        if path == "/json":
            return httpx.Response(200, content=b'{"id": 1, "name": "Ada"}')
        if path == "/connect-error":
            msg = "connection refused"
            raise httpx.ConnectError(msg, request=request)
        if path == "/timeout":
            msg = "timed out"
            raise httpx.ReadTimeout(msg, request=request)
        if path == "/corrupt-gzip":
            return httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip")
            )
        if path == "/drip":
            return httpx.Response(
                200,
                stream=DripStream(
                    chunks=int(request.url.params.get("chunks", "1")),
                    delay=float(request.url.params.get("delay", "0")),
                ),
            )
        return httpx.Response(404, text="not found")


class DripStream(httpx.SyncByteStream):
    """Response body sent one byte at a time with a pause before each.

    Args:
        chunks: The number of one-byte chunks.
        delay: The pause in seconds before each chunk.
    """

    def __init__(self, chunks: int, delay: float) -> None:
        self.chunks = chunks
        self.delay = delay

    def __iter__(self) -> Iterator[bytes]:
        for _ in range(self.chunks):
            time.sleep(self.delay)
            yield b"x"
