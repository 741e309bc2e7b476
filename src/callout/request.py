r"""Request executor implementing the status-driven retry loop."""

from __future__ import annotations

__all__ = ["request"]

import json
import logging
import time
from typing import TYPE_CHECKING

from callout.core.config import ClientConfig
from callout.core.retry_logic import Outcome, classify_status
from callout.exceptions import DecodeError, ResponseError
from callout.options import RequestOptions
from callout.tracing import attempt_span_name
from callout.transport import OutboundRequest, RoundTrip, open_client, round_trip, validate_url

if TYPE_CHECKING:
    import httpx

    from callout.options import JSONTarget, RequestOption

logger: logging.Logger = logging.getLogger(__name__)


def request(
    method: str,
    url: str,
    body: str | bytes | None = None,
    *options: RequestOption,
    config: ClientConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> bytes:
    r"""Send an HTTP request, retrying on 5xx responses.

    The call makes up to ``retries + 1`` attempts:

    - a 2xx response ends the call successfully;
    - a 3xx or 4xx response ends the call immediately with a
      ``ResponseError``, whatever the remaining retry budget;
    - any other status is retried while attempts remain. Once the budget
      is spent, a ``ResponseError`` with the last status and body is
      raised;
    - a transport failure is never retried and raises ``TransportError``.

    Args:
        method: HTTP method (GET, HEAD, POST, ...).
        url: The URL to send the request to.
        body: Optional request body. ``str`` bodies are UTF-8 encoded.
        *options: Request options overriding the defaults of ``config``.
        config: The client default configuration. If ``None``, a default
            ``ClientConfig`` is used.
        transport: Optional httpx transport used instead of the network.

    Returns:
        The response body, or ``b""`` if it was copied to a writer given
        with ``write_body``.

    Raises:
        TransportError: If an attempt fails before a complete response is
            received, including when it exceeds the timeout.
        ResponseError: If the call ends on a non-2xx response.
        DecodeError: If ``unmarshal_json_body`` was given and the body of
            the successful response is not valid JSON.
        BodyWriteError: If the writer given with ``write_body`` fails.
        ValueError: If both ``write_body`` and ``unmarshal_json_body`` were
            given.

    Example:
        ```pycon
        >>> from callout.request import request
        >>> from callout import with_retries
        >>> body = request(
        ...     "GET", "https://api.example.com/data", None, with_retries(2)
        ... )  # doctest: +SKIP

        ```
    """
    request_options = RequestOptions.from_options(*options)
    if request_options.body_writer is not None and request_options.json_target is not None:
        msg = "write_body and unmarshal_json_body cannot be used on the same request"
        raise ValueError(msg)
    validate_url(method, url)
    effective = request_options.resolve(config if config is not None else ClientConfig())
    if isinstance(body, str):
        body = body.encode()
    outbound = OutboundRequest(method=method, url=url, headers=effective.headers, body=body)

    attempts = effective.retries + 1
    last = RoundTrip(status_code=0, body=b"")
    with open_client(
        timeout=effective.timeout,
        skip_tls_verify=effective.skip_tls_verify,
        transport=transport,
    ) as client:
        for attempt in range(attempts):
            if attempt > 0 and effective.backoff_strategy is not None:
                delay = effective.backoff_strategy.calculate(attempt - 1)
                logger.debug(f"{method} request to {url} waiting {delay:.2f}s before retry")
                time.sleep(delay)

            logger.debug(f"{method} request to {url} attempt {attempt + 1}/{attempts}")
            span = (
                effective.tracer.trace(attempt_span_name(method, url, attempt, effective.retries))
                if effective.tracer is not None
                else None
            )
            try:
                last = round_trip(
                    client,
                    outbound,
                    timeout=effective.timeout,
                    writer=request_options.body_writer,
                )
            finally:
                if span is not None:
                    span.end()

            outcome = classify_status(last.status_code)
            if outcome is Outcome.SUCCESS:
                if request_options.json_target is not None:
                    _decode_json(url, last.body, request_options.json_target)
                return last.body
            if outcome is Outcome.TERMINAL:
                logger.debug(
                    f"{method} request to {url} failed with non-retryable status "
                    f"{last.status_code}"
                )
                break
            logger.debug(
                f"{method} request to {url} failed with retryable status {last.status_code} "
                f"on attempt {attempt + 1}/{attempts}"
            )

    raise ResponseError(url=url, status_code=last.status_code, body=last.body)


def _decode_json(url: str, body: bytes, target: JSONTarget) -> None:
    try:
        target.set(json.loads(body))
    except ValueError as exc:
        raise DecodeError(url=url, body=body, cause=exc) from exc
