r"""Tracing capability used to wrap request attempts in spans.

The client only depends on the narrow ``Tracer``/``Span`` protocols
below, so any tracing backend can be plugged in. An adapter for
OpenTelemetry is provided; it requires the optional
``opentelemetry-api`` dependency.

Example:
    ```python
    from opentelemetry import trace

    from callout import Callout, with_default_tracer
    from callout.tracing import OpenTelemetryTracer

    tracer = OpenTelemetryTracer(trace.get_tracer("billing-service"))
    callout = Callout(with_default_tracer(tracer))
    ```
"""

from __future__ import annotations

__all__ = ["OpenTelemetrySpan", "OpenTelemetryTracer", "Span", "Tracer", "attempt_span_name"]

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

if TYPE_CHECKING:
    from opentelemetry import trace


@runtime_checkable
class Span(Protocol):
    """A unit of traced work, closed with ``end``."""

    def end(self) -> None:
        """Close the span."""


@runtime_checkable
class Tracer(Protocol):
    """Factory of spans."""

    def trace(self, name: str) -> Span:
        """Open a new span.

        Args:
            name: The span name.

        Returns:
            The opened span.
        """


def attempt_span_name(method: str, url: str, attempt: int, retries: int) -> str:
    """Return the span name of one request attempt.

    Args:
        method: The HTTP method.
        url: The requested URL. Only its path is used.
        attempt: The attempt index (0-indexed).
        retries: The retry budget of the call.

    Returns:
        The span name.

    Example:
        ```pycon
        >>> from callout.tracing import attempt_span_name
        >>> attempt_span_name("GET", "https://api.example.com/users?page=2", 0, 2)
        'GET /users attempt: (1/3)'

        ```
    """
    path = httpx.URL(url).path or "/"
    return f"{method} {path} attempt: ({attempt + 1}/{retries + 1})"


class OpenTelemetrySpan:
    """``Span`` backed by an OpenTelemetry span."""

    def __init__(self, span: trace.Span) -> None:
        self._span = span

    def end(self) -> None:
        self._span.end()


class OpenTelemetryTracer:
    """``Tracer`` backed by an OpenTelemetry tracer.

    Spans are started in the current OpenTelemetry context, so attempts
    made inside an active span become its children.

    Args:
        tracer: The OpenTelemetry tracer to start spans with.
    """

    def __init__(self, tracer: trace.Tracer) -> None:
        self._tracer = tracer

    @classmethod
    def for_service(cls, service_name: str) -> OpenTelemetryTracer:
        """Create a tracer from the globally configured tracer provider.

        Args:
            service_name: The instrumentation name passed to
                ``opentelemetry.trace.get_tracer``.

        Returns:
            The tracer adapter.
        """
        from opentelemetry import trace  # noqa: PLC0415

        return cls(trace.get_tracer(service_name))

    def trace(self, name: str) -> OpenTelemetrySpan:
        return OpenTelemetrySpan(self._tracer.start_span(name))
