r"""Core configuration, validation and retry decision logic."""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "TLS_SKIP_VERIFY_ENV",
    "ClientConfig",
    "Outcome",
    "classify_status",
    "merge_headers",
    "validate_retries",
    "validate_timeout",
]

from callout.core.config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    TLS_SKIP_VERIFY_ENV,
    ClientConfig,
    merge_headers,
)
from callout.core.retry_logic import Outcome, classify_status
from callout.core.validation import validate_retries, validate_timeout
