r"""Minimal WSGI server that logs every inbound request.

This module is independent of the client. It wraps a WSGI application
so that each request is logged as ``"{remote_addr} {method} {url}"``
before being handled.

Example:
    ```python
    import logging

    from callout.server import listen_and_serve


    def app(environ, start_response):
        start_response("200 OK", [("Content-Type", "text/plain")])
        return [b"ok"]


    logging.basicConfig(level=logging.INFO)
    listen_and_serve("127.0.0.1", 8080, app)
    ```
"""

from __future__ import annotations

__all__ = ["LoggingMiddleware", "listen_and_serve", "make_server"]

import logging
from typing import TYPE_CHECKING
from wsgiref import simple_server
from wsgiref.util import request_uri

if TYPE_CHECKING:
    from collections.abc import Iterable

    from _typeshed.wsgi import StartResponse, WSGIApplication, WSGIEnvironment

logger: logging.Logger = logging.getLogger(__name__)


class LoggingMiddleware:
    """Log each request, then delegate to the wrapped application.

    Args:
        app: The WSGI application handling the requests.
    """

    def __init__(self, app: WSGIApplication) -> None:
        self.app = app

    def __call__(self, environ: WSGIEnvironment, start_response: StartResponse) -> Iterable[bytes]:
        logger.info(
            f"{environ.get('REMOTE_ADDR', '-')} {environ.get('REQUEST_METHOD', '-')} "
            f"{request_uri(environ)}"
        )
        return self.app(environ, start_response)


class _QuietRequestHandler(simple_server.WSGIRequestHandler):
    # requests are already logged by LoggingMiddleware
    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


def make_server(host: str, port: int, app: WSGIApplication) -> simple_server.WSGIServer:
    """Create a server for ``app`` wrapped in ``LoggingMiddleware``.

    Args:
        host: The interface to bind.
        port: The port to bind. ``0`` picks a free port.
        app: The WSGI application handling the requests.

    Returns:
        The bound, not yet serving, server.
    """
    return simple_server.make_server(
        host, port, LoggingMiddleware(app), handler_class=_QuietRequestHandler
    )


def listen_and_serve(host: str, port: int, app: WSGIApplication) -> None:
    """Serve ``app`` on ``host:port`` until interrupted."""
    with make_server(host, port, app) as server:
        logger.info(f"listening on {host}:{server.server_port}")
        server.serve_forever()
