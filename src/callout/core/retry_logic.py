r"""Status-code driven retry decision logic.

This module contains the stateless classification used by the request
executor to decide, after each attempt, whether the call succeeded,
must stop, or may be retried.
"""

from __future__ import annotations

__all__ = ["Outcome", "classify_status"]

from enum import Enum


class Outcome(Enum):
    """Outcome of a single attempt, derived from its status code."""

    SUCCESS = "success"
    TERMINAL = "terminal"
    RETRYABLE = "retryable"


def classify_status(status_code: int) -> Outcome:
    """Classify an HTTP status code.

    Args:
        status_code: The HTTP status code of the response.

    Returns:
        ``Outcome.SUCCESS`` for 2xx, ``Outcome.TERMINAL`` for 3xx and
        4xx, and ``Outcome.RETRYABLE`` for everything else (5xx and
        unexpected codes below 200).

    Example:
        ```pycon
        >>> from callout.core.retry_logic import classify_status
        >>> classify_status(204)
        <Outcome.SUCCESS: 'success'>
        >>> classify_status(404)
        <Outcome.TERMINAL: 'terminal'>
        >>> classify_status(503)
        <Outcome.RETRYABLE: 'retryable'>

        ```
    """
    if 200 <= status_code < 300:
        return Outcome.SUCCESS
    if 300 <= status_code < 500:
        return Outcome.TERMINAL
    return Outcome.RETRYABLE
