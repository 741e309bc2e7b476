r"""Client holding default request configuration.

This module provides ``Callout``, which keeps a default
``ClientConfig`` built from client options and exposes one method per
supported HTTP verb. Each call can override the defaults with request
options.
"""

from __future__ import annotations

__all__ = ["Callout", "Caller"]

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from callout.core.config import ClientConfig
from callout.request import request

if TYPE_CHECKING:
    import httpx

    from callout.options import ClientOption, RequestOption


@runtime_checkable
class Caller(Protocol):
    r"""Anything that can send GET, HEAD and POST requests like a
    ``Callout``.

    Code that only sends requests can depend on ``Caller`` so that tests
    can substitute a fake.

    Example:
        ```pycon
        >>> from callout import Callout, Caller
        >>> isinstance(Callout(), Caller)
        True

        ```
    """

    def get(self, url: str, *options: RequestOption) -> bytes: ...

    def head(self, url: str, *options: RequestOption) -> bytes: ...

    def post(self, url: str, body: str | bytes, *options: RequestOption) -> bytes: ...


class Callout:
    r"""HTTP client with default headers, timeout, retries and TLS policy.

    Client options are applied in order: for scalar settings the last
    option wins, header options merge into the headers accumulated so
    far. The configuration is never modified by calls, so one instance
    can be shared between threads.

    Each call opens its own connection with the effective timeout and TLS
    policy of that call, and closes it before returning.

    Args:
        *options: Client options, e.g. ``with_default_retries(2)``.
        transport: Optional httpx transport used instead of the network,
            e.g. ``httpx.MockTransport`` in tests.

    Example:
        ```pycon
        >>> from callout import Callout, with_default_header, with_default_retries
        >>> callout = Callout(
        ...     with_default_header("Authorization", "Bearer token"),
        ...     with_default_retries(3),
        ... )
        >>> callout.config.retries
        3
        >>> body = callout.get("https://api.example.com/data")  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *options: ClientOption,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        config = ClientConfig()
        for option in options:
            config = option(config)
        self._config = config
        self._transport = transport

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config})"

    @property
    def config(self) -> ClientConfig:
        """The default configuration of the client."""
        return self._config

    def request(
        self,
        method: str,
        url: str,
        body: str | bytes | None = None,
        *options: RequestOption,
    ) -> bytes:
        r"""Send an HTTP request with the client defaults.

        Args:
            method: HTTP method.
            url: The URL to send the request to.
            body: Optional request body.
            *options: Request options overriding the client defaults.

        Returns:
            The response body, or ``b""`` if it was written to a writer.

        Raises:
            TransportError: If an attempt fails before a response is received.
            ResponseError: If the call ends on a non-2xx response.
            DecodeError: If the JSON body of a successful response cannot be decoded.
            BodyWriteError: If the writer given with ``write_body`` fails.
        """
        return request(
            method,
            url,
            body,
            *options,
            config=self._config,
            transport=self._transport,
        )

    def get(self, url: str, *options: RequestOption) -> bytes:
        r"""Send an HTTP GET request.

        Example:
            ```pycon
            >>> from callout import Callout, JSONTarget, unmarshal_json_body
            >>> target = JSONTarget()
            >>> body = Callout().get(
            ...     "https://api.example.com/data", unmarshal_json_body(target)
            ... )  # doctest: +SKIP

            ```
        """
        return self.request("GET", url, None, *options)

    def head(self, url: str, *options: RequestOption) -> bytes:
        """Send an HTTP HEAD request."""
        return self.request("HEAD", url, None, *options)

    def post(self, url: str, body: str | bytes, *options: RequestOption) -> bytes:
        r"""Send an HTTP POST request.

        An empty body sends no content.

        Example:
            ```pycon
            >>> from callout import Callout, with_header
            >>> body = Callout().post(
            ...     "https://api.example.com/data",
            ...     '{"key": "value"}',
            ...     with_header("Content-Type", "application/json"),
            ... )  # doctest: +SKIP

            ```
        """
        return self.request("POST", url, body or None, *options)
