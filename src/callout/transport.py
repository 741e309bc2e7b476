r"""Single HTTP round trips over httpx.

This module is the only place that talks to the HTTP stack. It opens a
call-scoped ``httpx.Client`` configured with the call's timeout and TLS
policy, and performs one round trip at a time with it, either buffering
the response body or copying it to a writer.
"""

from __future__ import annotations

__all__ = [
    "BodyWriter",
    "OutboundRequest",
    "RoundTrip",
    "build_timeout",
    "open_client",
    "round_trip",
    "validate_url",
]

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Protocol

import httpx

from callout.core.config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from callout.exceptions import BodyWriteError, TransportError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)


class BodyWriter(Protocol):
    """Destination of a streamed response body, e.g. an open binary file."""

    def write(self, data: bytes, /) -> object: ...


@dataclass(frozen=True)
class OutboundRequest:
    """A request built once per call and sent on every attempt.

    Args:
        method: The HTTP method.
        url: The request URL.
        headers: The merged request headers.
        body: The request body. Kept as bytes so it can be re-sent on
            every attempt.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None


class RoundTrip(NamedTuple):
    """Status code and body of one response.

    ``body`` is empty when the body was copied to a writer.
    """

    status_code: int
    body: bytes


def validate_url(method: str, url: str) -> None:
    """Check that ``url`` is an absolute HTTP(S) URL.

    Args:
        method: The HTTP method, used in error messages.
        url: The URL to check.

    Raises:
        TransportError: If the URL is malformed, relative, or uses a
            scheme other than ``http`` or ``https``.

    Example:
        ```pycon
        >>> from callout.transport import validate_url
        >>> validate_url("GET", "https://api.example.com/data")
        >>> validate_url("GET", "api.example.com/data")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        callout.exceptions.TransportError: GET request to api.example.com/data failed: ...

        ```
    """
    try:
        parsed = httpx.URL(url)
        if parsed.scheme not in ("http", "https"):
            msg = f"Request URL is missing an 'http://' or 'https://' protocol: {url!r}"
            raise httpx.UnsupportedProtocol(msg)
        if not parsed.host:
            msg = f"Request URL has no host: {url!r}"
            raise httpx.InvalidURL(msg)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
        raise TransportError(
            method=method,
            url=url,
            message=f"{method} request to {url} failed: {exc}",
            cause=exc,
        ) from exc


def build_timeout(timeout: float) -> httpx.Timeout:
    """Return the httpx timeout of an attempt.

    Args:
        timeout: The read, write and pool timeout in seconds. The connect
            phase is bounded by ``DEFAULT_CONNECT_TIMEOUT`` as well.

    Returns:
        The httpx timeout.

    Example:
        ```pycon
        >>> from callout.transport import build_timeout
        >>> build_timeout(30.0)
        Timeout(connect=5.0, read=30.0, write=30.0, pool=30.0)

        ```
    """
    return httpx.Timeout(timeout, connect=min(timeout, DEFAULT_CONNECT_TIMEOUT))


def open_client(
    *,
    timeout: float,
    skip_tls_verify: bool,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Open the httpx client used by all attempts of one call.

    Args:
        timeout: The attempt timeout in seconds.
        skip_tls_verify: If ``True``, TLS certificates are not verified.
        transport: Optional httpx transport. If set, TLS verification is
            up to the transport.

    Returns:
        A new ``httpx.Client``. Redirects are not followed.
    """
    return httpx.Client(
        timeout=build_timeout(timeout),
        verify=not skip_tls_verify,
        transport=transport,
        follow_redirects=False,
    )


def round_trip(
    client: httpx.Client,
    request: OutboundRequest,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    writer: BodyWriter | None = None,
) -> RoundTrip:
    """Send ``request`` once and read the response.

    The response is always fully consumed and closed before returning,
    including when copying to ``writer`` fails.

    ``timeout`` bounds the whole attempt, from sending the request to
    reading the last body chunk. Each phase is also bounded by the httpx
    timeout of ``client``, and the deadline is checked whenever a body
    chunk arrives, so a server trickling its body out cannot stretch the
    attempt past the deadline by more than one phase timeout.

    Args:
        client: The call-scoped client from ``open_client``.
        request: The request to send.
        timeout: The maximum duration of the attempt in seconds.
        writer: If set, the body of a 2xx response is copied to it instead
            of being buffered. Bodies of other responses are always
            buffered so they can be reported.

    Returns:
        The status code and buffered body.

    Raises:
        TransportError: If no complete response could be received (invalid
            URL, DNS, connect, TLS, timeout or body decoding failures).
        BodyWriteError: If ``writer`` fails.
    """
    deadline = time.monotonic() + timeout
    try:
        with client.stream(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
        ) as response:
            _check_deadline(response, deadline, timeout)
            sink = writer if response.is_success else None
            chunks = []
            for chunk in response.iter_bytes():
                _check_deadline(response, deadline, timeout)
                if sink is not None:
                    _write_chunk(sink, chunk, request.url)
                else:
                    chunks.append(chunk)
            return RoundTrip(response.status_code, b"".join(chunks))
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        logger.debug(
            f"{request.method} request to {request.url} encountered {type(exc).__name__}: {exc}"
        )
        raise TransportError(
            method=request.method,
            url=request.url,
            message=f"{request.method} request to {request.url} failed: {exc}",
            cause=exc,
        ) from exc


def _check_deadline(response: httpx.Response, deadline: float, timeout: float) -> None:
    if time.monotonic() > deadline:
        msg = f"attempt exceeded the timeout of {timeout}s"
        raise httpx.ReadTimeout(msg, request=response.request)


def _write_chunk(writer: BodyWriter, chunk: bytes, url: str) -> None:
    try:
        writer.write(chunk)
    except Exception as exc:
        raise BodyWriteError(url=url, cause=exc) from exc
