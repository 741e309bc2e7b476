r"""Functional options for ``Callout`` clients and individual requests.

Client options (``ClientOption``) are applied in order by the
``Callout`` constructor to build its ``ClientConfig``. Request options
(``RequestOption``) are applied in order by every call to build its
``RequestOptions``. For scalar values the last option wins; header
options merge into the headers accumulated so far.

Example:
    ```pycon
    >>> from callout import Callout, with_default_header, with_default_retries
    >>> from callout import with_header, with_retries
    >>> callout = Callout(
    ...     with_default_header("Accept", "application/json"), with_default_retries(2)
    ... )
    >>> body = callout.get(
    ...     "https://api.example.com/data", with_header("X-Request-Id", "42"), with_retries(0)
    ... )  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "ClientOption",
    "JSONTarget",
    "RequestOption",
    "RequestOptions",
    "default_skip_tls_verify",
    "default_skip_tls_verify_from_env",
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

import os
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from callout.core.config import DEFAULT_TIMEOUT, TLS_SKIP_VERIFY_ENV, ClientConfig, merge_headers
from callout.core.validation import validate_retries, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Mapping

    from callout.backoff import BaseBackoffStrategy
    from callout.tracing import Tracer
    from callout.transport import BodyWriter

ClientOption = Callable[[ClientConfig], ClientConfig]


class JSONTarget:
    """Receives the decoded JSON body of a successful response.

    Example:
        ```pycon
        >>> from callout import Callout, JSONTarget, unmarshal_json_body
        >>> target = JSONTarget()
        >>> body = Callout().get(
        ...     "https://api.example.com/users/1", unmarshal_json_body(target)
        ... )  # doctest: +SKIP
        >>> target.value["name"]  # doctest: +SKIP
        'Ada'

        ```
    """

    def __init__(self) -> None:
        self.value: Any = None
        self.is_set = False

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(value={self.value!r})"

    def set(self, value: Any) -> None:
        self.value = value
        self.is_set = True


@dataclass
class RequestOptions:
    """Per-call overrides of the client defaults.

    ``None`` means "not set": the client default is used. An explicit
    ``0`` or ``False`` is an override like any other value.

    Args:
        headers: Headers merged over the client default headers.
        retries: Retry count override.
        timeout: Timeout override in seconds.
        skip_tls_verify: TLS verification override.
        body_writer: If set, the response body is copied to this writer
            instead of being returned.
        json_target: If set, the response body is decoded as JSON into
            this target.
        tracer: Tracer override.
        backoff_strategy: Backoff strategy override.
    """

    headers: dict[str, str] = field(default_factory=dict)
    retries: int | None = None
    timeout: float | None = None
    skip_tls_verify: bool | None = None
    body_writer: BodyWriter | None = None
    json_target: JSONTarget | None = None
    tracer: Tracer | None = None
    backoff_strategy: BaseBackoffStrategy | None = None

    @classmethod
    def from_options(cls, *options: RequestOption) -> RequestOptions:
        """Build request options by applying ``options`` in order."""
        request_options = cls()
        for option in options:
            request_options = option(request_options)
        return request_options

    def resolve(self, config: ClientConfig) -> ClientConfig:
        """Return the effective configuration of a call.

        Args:
            config: The client default configuration.

        Returns:
            ``config`` with the overrides set on this object applied.
        """
        return config.merge(
            headers=merge_headers(config.headers, self.headers),
            retries=self.retries,
            timeout=self.timeout,
            skip_tls_verify=self.skip_tls_verify,
            tracer=self.tracer,
            backoff_strategy=self.backoff_strategy,
        )


RequestOption = Callable[[RequestOptions], RequestOptions]


####################
#  Client options  #
####################


def with_default_header(name: str, value: str) -> ClientOption:
    """Add a header sent with every request of the client."""
    return with_default_headers({name: value})


def with_default_headers(headers: Mapping[str, str]) -> ClientOption:
    """Add headers sent with every request of the client.

    The headers are merged into the default headers set by previous
    options.
    """
    headers = dict(headers)

    def option(config: ClientConfig) -> ClientConfig:
        return config.merge(headers=merge_headers(config.headers, headers))

    return option


def with_default_retries(retries: int) -> ClientOption:
    """Set the default retry count of the client.

    Raises:
        ValueError: If retries is negative.
    """
    validate_retries(retries)

    def option(config: ClientConfig) -> ClientConfig:
        return config.merge(retries=retries)

    return option


def with_default_timeout(timeout: float | None) -> ClientOption:
    """Set the default timeout of the client, in seconds.

    A timeout of ``0`` or ``None`` restores ``DEFAULT_TIMEOUT``.

    Raises:
        ValueError: If timeout is negative.
    """
    timeout = timeout or DEFAULT_TIMEOUT
    validate_timeout(timeout)

    def option(config: ClientConfig) -> ClientConfig:
        return config.merge(timeout=timeout)

    return option


def default_skip_tls_verify(skip: bool) -> ClientOption:
    """Set whether the client skips TLS certificate verification."""

    def option(config: ClientConfig) -> ClientConfig:
        return config.merge(skip_tls_verify=skip)

    return option


def default_skip_tls_verify_from_env(environ: Mapping[str, str] | None = None) -> ClientOption:
    """Set TLS verification from the ``TLS_SKIP_VERIFY`` environment variable.

    Verification is skipped only if the variable is ``true``
    (case-insensitive). The variable is read when the option is built.

    Args:
        environ: The environment to read. Defaults to ``os.environ``.
    """
    environ = os.environ if environ is None else environ
    return default_skip_tls_verify(environ.get(TLS_SKIP_VERIFY_ENV, "").lower() == "true")


def with_default_tracer(tracer: Tracer) -> ClientOption:
    """Wrap every attempt of the client in a span of ``tracer``."""

    def option(config: ClientConfig) -> ClientConfig:
        return config.merge(tracer=tracer)

    return option


def with_default_backoff(backoff_strategy: BaseBackoffStrategy) -> ClientOption:
    """Wait between the retry attempts of the client."""

    def option(config: ClientConfig) -> ClientConfig:
        return config.merge(backoff_strategy=backoff_strategy)

    return option


#####################
#  Request options  #
#####################


def with_header(name: str, value: str) -> RequestOption:
    """Add a header to the request, overriding a default of the same name."""
    return with_headers({name: value})


def with_headers(headers: Mapping[str, str]) -> RequestOption:
    """Add headers to the request, overriding defaults of the same name."""
    headers = dict(headers)

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, headers=merge_headers(request_options.headers, headers))

    return option


def with_retries(retries: int) -> RequestOption:
    """Override the retry count for this request.

    ``with_retries(0)`` disables retries even if the client default is
    non-zero.

    Raises:
        ValueError: If retries is negative.
    """
    validate_retries(retries)

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, retries=retries)

    return option


def with_timeout(timeout: float | None) -> RequestOption:
    """Override the timeout for this request, in seconds.

    ``None`` keeps the client default and ``0`` selects
    ``DEFAULT_TIMEOUT``.

    Raises:
        ValueError: If timeout is negative.
    """
    if timeout is not None:
        validate_timeout(timeout)

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, timeout=timeout)

    return option


def skip_tls_verify(skip: bool) -> RequestOption:
    """Override TLS certificate verification for this request."""

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, skip_tls_verify=skip)

    return option


def write_body(writer: BodyWriter) -> RequestOption:
    """Copy the response body to ``writer`` instead of returning it.

    The call then returns ``b""`` on success.
    """

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, body_writer=writer)

    return option


def unmarshal_json_body(target: JSONTarget) -> RequestOption:
    """Decode the successful response body as JSON into ``target``.

    Raises:
        TypeError: If target is not a ``JSONTarget``.
    """
    if not isinstance(target, JSONTarget):
        msg = f"target must be a JSONTarget, got {type(target).__qualname__}"
        raise TypeError(msg)

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, json_target=target)

    return option


def with_tracer(tracer: Tracer) -> RequestOption:
    """Override the tracer for this request."""

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, tracer=tracer)

    return option


def with_backoff(backoff_strategy: BaseBackoffStrategy) -> RequestOption:
    """Override the backoff strategy for this request."""

    def option(request_options: RequestOptions) -> RequestOptions:
        return replace(request_options, backoff_strategy=backoff_strategy)

    return option
