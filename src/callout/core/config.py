r"""Configuration dataclass and defaults for the Callout client.

This module provides the configuration constants and the immutable
``ClientConfig`` object that holds the defaults of a ``Callout``
instance. Per-call overrides are layered on top of it with
``ClientConfig.merge``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "TLS_SKIP_VERIFY_ENV",
    "ClientConfig",
    "merge_headers",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import httpx

from callout.core.validation import validate_retries, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Mapping

    from callout.backoff import BaseBackoffStrategy
    from callout.tracing import Tracer


# Default timeout in seconds for a single attempt
# Used when no timeout is configured or when the configured timeout is 0
DEFAULT_TIMEOUT = 60.0

# Maximum seconds to wait while establishing a connection (TCP + TLS)
DEFAULT_CONNECT_TIMEOUT = 5.0

# Default number of retries
# Total attempts = retries + 1 (initial attempt)
DEFAULT_RETRIES = 0

# Environment variable read by default_skip_tls_verify_from_env()
TLS_SKIP_VERIFY_ENV = "TLS_SKIP_VERIFY"


def merge_headers(*header_sets: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings, later values overriding earlier ones.

    Header names are compared case-insensitively and returned in lower
    case.

    Args:
        *header_sets: The header mappings to merge, in order of
            increasing precedence. ``None`` entries are skipped.

    Returns:
        A new dictionary with the merged headers.

    Example:
        ```pycon
        >>> from callout.core.config import merge_headers
        >>> merge_headers({"Accept": "text/plain", "X-A": "1"}, {"accept": "application/json"})
        {'accept': 'application/json', 'x-a': '1'}

        ```
    """
    merged = httpx.Headers()
    for headers in header_sets:
        if not headers:
            continue
        for name, value in headers.items():
            merged[name] = value
    return dict(merged.items())


@dataclass(frozen=True)
class ClientConfig:
    """Default configuration of a ``Callout`` client.

    The configuration is immutable: every change produces a new instance,
    which makes a single ``ClientConfig`` safe to share between threads.

    Args:
        headers: Default headers sent with every request.
        timeout: Maximum seconds an attempt may take. A value of 0 falls
            back to ``DEFAULT_TIMEOUT``. Must be >= 0.
        retries: Number of retries after the initial attempt. Must be >= 0.
        skip_tls_verify: If ``True``, TLS certificates are not verified.
        tracer: Optional tracer used to wrap every attempt in a span.
        backoff_strategy: Optional strategy computing the delay between
            attempts. If ``None``, retries are immediate.

    Example:
        ```pycon
        >>> from callout.core.config import ClientConfig
        >>> config = ClientConfig(retries=2)
        >>> config.retries
        2
        >>> config.timeout
        60.0
        >>> config.merge(retries=0).retries
        0

        ```
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    skip_tls_verify: bool = False
    tracer: Tracer | None = None
    backoff_strategy: BaseBackoffStrategy | None = None

    def __post_init__(self) -> None:
        """Validate and normalize the configuration.

        Raises:
            ValueError: If retries or timeout is negative.
        """
        validate_retries(self.retries)
        validate_timeout(self.timeout)
        # frozen dataclass, so normalized values go through object.__setattr__
        object.__setattr__(self, "headers", merge_headers(self.headers))
        if not self.timeout:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT)

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-``None`` override values are applied, so ``None`` means
        "keep the current value" while ``0`` and ``False`` are explicit
        overrides.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from callout.core.config import ClientConfig
            >>> config = ClientConfig(retries=3)
            >>> config.merge(retries=None).retries
            3
            >>> config.merge(retries=0).retries
            0

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
