r"""Parameter validation utilities for outbound requests.

This module provides validation functions for the retry and timeout
parameters so that invalid values are rejected when an option is built,
not when a request is already in flight.
"""

from __future__ import annotations

__all__ = ["validate_retries", "validate_timeout"]


def validate_timeout(timeout: float) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds an attempt may take. Must be >= 0.
            A value of 0 means "use the default timeout".

    Raises:
        ValueError: If timeout is negative.

    Example:
        ```pycon
        >>> from callout.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)
        >>> validate_timeout(-1)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be >= 0, got -1

        ```
    """
    if timeout < 0:
        msg = f"timeout must be >= 0, got {timeout}"
        raise ValueError(msg)


def validate_retries(retries: int) -> None:
    """Validate retry count parameter.

    Args:
        retries: Number of retries after the initial attempt.
            Must be >= 0. A value of 0 means only the initial attempt.

    Raises:
        ValueError: If retries is negative.

    Example:
        ```pycon
        >>> from callout.core.validation import validate_retries
        >>> validate_retries(3)
        >>> validate_retries(-1)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: retries must be >= 0, got -1

        ```
    """
    if retries < 0:
        msg = f"retries must be >= 0, got {retries}"
        raise ValueError(msg)
