r"""Delay strategies applied between retry attempts.

By default a ``Callout`` retries immediately. A backoff strategy can be
configured with ``with_default_backoff`` (client level) or
``with_backoff`` (call level) to wait between attempts.
"""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ConstantBackoff", "ExponentialBackoff"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies."""

    @abstractmethod
    def calculate(self, retry: int) -> float:
        """Return the delay in seconds before the given retry.

        Args:
            retry: The retry number (0-indexed). ``retry=0`` is the delay
                between the initial attempt and the first retry.

        Returns:
            The delay in seconds.
        """


class ConstantBackoff(BaseBackoffStrategy):
    """Wait the same delay before every retry.

    Args:
        delay: The delay in seconds. Must be >= 0.

    Example:
        ```pycon
        >>> from callout.backoff import ConstantBackoff
        >>> ConstantBackoff(delay=0.5).calculate(4)
        0.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be >= 0, got {delay}"
            raise ValueError(msg)
        self.delay = delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"

    def calculate(self, retry: int) -> float:  # noqa: ARG002
        return self.delay


class ExponentialBackoff(BaseBackoffStrategy):
    """Double the delay before every retry, with an optional cap.

    The delay is ``base_delay * 2 ** retry``.

    Args:
        base_delay: The delay before the first retry. Must be >= 0.
        max_delay: Optional upper bound for the delay. Must be > 0 if set.

    Example:
        ```pycon
        >>> from callout.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5, max_delay=3.0)
        >>> [backoff.calculate(i) for i in range(4)]
        [0.5, 1.0, 2.0, 3.0]

        ```
    """

    def __init__(self, base_delay: float = 0.3, max_delay: float | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be >= 0, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be > 0, got {max_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, retry: int) -> float:
        delay = self.base_delay * (2**retry)
        if self.max_delay is None:
            return delay
        return min(delay, self.max_delay)
