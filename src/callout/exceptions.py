r"""Exceptions raised by the Callout client.

Two disjoint kinds of failure are reported:

- ``TransportError``: the request never produced a complete HTTP
  response (malformed URL, DNS, connect, TLS, timeout or body decoding
  failures). It is never retried.
- ``ResponseError``: the server answered, but with a terminal non-2xx
  status, or retryable statuses until the retry budget ran out.

``DecodeError`` reports a 2xx response whose body could not be decoded
as JSON. The raw body is kept on the exception. ``BodyWriteError``
reports a writer given with ``write_body`` that failed.
"""

from __future__ import annotations

__all__ = ["BodyWriteError", "CalloutError", "DecodeError", "ResponseError", "TransportError"]


class CalloutError(Exception):
    """Base class of all errors raised by the Callout client."""


class TransportError(CalloutError):
    """Raised when an attempt fails before an HTTP response is received.

    Args:
        method: The HTTP method of the request.
        url: The requested URL.
        message: A human-readable description of the failure.
        cause: The underlying exception.

    Example:
        ```pycon
        >>> from callout.exceptions import TransportError
        >>> error = TransportError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     message="GET request to https://api.example.com/data failed: boom",
        ... )
        >>> error.url
        'https://api.example.com/data'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.cause = cause


class ResponseError(CalloutError):
    """Raised when a request ends on a non-2xx HTTP response.

    Args:
        url: The requested URL.
        status_code: The status code of the last response.
        body: The body of the last response.

    Example:
        ```pycon
        >>> from callout.exceptions import ResponseError
        >>> error = ResponseError(url="https://api.example.com/500", status_code=500, body=b"500")
        >>> print(error)
        error calling https://api.example.com/500, got status code 500 with body:
        500

        ```
    """

    def __init__(self, url: str, status_code: int, body: bytes) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"error calling {url}, got status code {status_code} with body:\n"
            f"{body.decode(errors='replace')}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResponseError):
            return NotImplemented
        return (self.url, self.status_code, self.body) == (
            other.url,
            other.status_code,
            other.body,
        )

    def __hash__(self) -> int:
        return hash((self.url, self.status_code, self.body))


class DecodeError(CalloutError):
    """Raised when a successful response body is not valid JSON.

    Args:
        url: The requested URL.
        body: The raw body that failed to decode.
        cause: The underlying decoding exception.
    """

    def __init__(self, url: str, body: bytes, cause: Exception | None = None) -> None:
        super().__init__(f"failed to unmarshal response from {url}: {cause}")
        self.url = url
        self.body = body
        self.cause = cause


class BodyWriteError(CalloutError):
    """Raised when copying a successful response body to a writer fails.

    Args:
        url: The requested URL.
        cause: The exception raised by the writer.

    Example:
        ```pycon
        >>> from callout.exceptions import BodyWriteError
        >>> print(BodyWriteError(url="https://api.example.com", cause=OSError("disk full")))
        failed to copy body from https://api.example.com: disk full

        ```
    """

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"failed to copy body from {url}: {cause}")
        self.url = url
        self.cause = cause
