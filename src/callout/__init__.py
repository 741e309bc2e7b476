r"""callout - Outbound HTTP client with layered defaults and status-driven retries.

A ``Callout`` holds default headers, timeout, retry count, TLS policy and
an optional tracer. Each ``get``, ``head`` or ``post`` call may override
them with request options, and returns the raw response body.

Key Features:
    - Functional options for client defaults and per-call overrides
    - Retries on 5xx responses, up to ``retries + 1`` attempts
    - 3xx and 4xx responses end the call immediately
    - Transport failures are never retried and raised as ``TransportError``
    - Response body returned, streamed to a writer, or decoded as JSON
    - Optional span per attempt through a pluggable tracer
    - Optional backoff between attempts

Example:
    ```python
    from callout import Callout, ResponseError, with_default_retries, with_retries

    callout = Callout(with_default_retries(2))
    try:
        body = callout.get("https://api.example.com/data", with_retries(0))
    except ResponseError as exc:
        print(exc.status_code, exc.body)
    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "BodyWriteError",
    "Callout",
    "CalloutError",
    "Caller",
    "ClientConfig",
    "DecodeError",
    "JSONTarget",
    "ResponseError",
    "TransportError",
    "__version__",
    "default_skip_tls_verify",
    "default_skip_tls_verify_from_env",
    "request",
    "skip_tls_verify",
    "unmarshal_json_body",
    "with_backoff",
    "with_default_backoff",
    "with_default_header",
    "with_default_headers",
    "with_default_retries",
    "with_default_timeout",
    "with_default_tracer",
    "with_header",
    "with_headers",
    "with_retries",
    "with_timeout",
    "with_tracer",
    "write_body",
]

from importlib.metadata import PackageNotFoundError, version

from callout.client import Callout, Caller
from callout.core.config import DEFAULT_RETRIES, DEFAULT_TIMEOUT, ClientConfig
from callout.exceptions import (
    BodyWriteError,
    CalloutError,
    DecodeError,
    ResponseError,
    TransportError,
)
from callout.options import (
    JSONTarget,
    default_skip_tls_verify,
    default_skip_tls_verify_from_env,
    skip_tls_verify,
    unmarshal_json_body,
    with_backoff,
    with_default_backoff,
    with_default_header,
    with_default_headers,
    with_default_retries,
    with_default_timeout,
    with_default_tracer,
    with_header,
    with_headers,
    with_retries,
    with_timeout,
    with_tracer,
    write_body,
)
from callout.request import request

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
