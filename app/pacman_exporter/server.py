"""HTTP server exposing the metrics endpoint.

Uses the WSGI application from prometheus_client behind a small
dispatcher, served by a single-threaded wsgiref server so that scrapes
are handled one at a time.
"""

import logging
import socket
import sys
from collections.abc import Callable, Iterable
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app

logger = logging.getLogger(__name__)

DEFAULT_LISTEN_ADDRESS = ":9101"
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_REQUEST_TIMEOUT = 10.0

_LANDING_PAGE = """<html>
<head><title>Pacman Exporter</title></head>
<body>
<h1>Pacman Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""

WSGIApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]


class ListenAddressError(ValueError):
    """Raised when a listen address cannot be parsed."""


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``:9101``) listens on all interfaces. IPv6 hosts must
    be bracketed (``[::1]:9101``).

    Args:
        address: Listen address string.

    Returns:
        Tuple of (host, port).

    Raises:
        ListenAddressError: If the address is not a valid host:port pair.
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise ListenAddressError(f"Missing port in listen address: {address!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ListenAddressError(f"IPv6 host must be bracketed: {address!r}")

    try:
        port = int(port_str)
    except ValueError as e:
        raise ListenAddressError(f"Invalid port in listen address: {address!r}") from e

    if not 0 <= port <= 65535:
        raise ListenAddressError(f"Port out of range in listen address: {address!r}")

    return host, port


def create_app(registry: CollectorRegistry, metrics_path: str = DEFAULT_METRICS_PATH) -> WSGIApp:
    """Create the WSGI application serving the metrics endpoint.

    Args:
        registry: Registry whose collectors are rendered on each scrape.
        metrics_path: Path of the metrics endpoint.

    Returns:
        WSGI application callable.
    """
    metrics_app = make_wsgi_app(registry)
    landing_page = _LANDING_PAGE.format(path=metrics_path).encode("utf-8")

    def app(environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        path = environ.get("PATH_INFO") or "/"
        if path == metrics_path:
            return metrics_app(environ, start_response)
        if path == "/":
            start_response("200 OK", [("Content-Type", "text/html; charset=utf-8")])
            return [landing_page]
        start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
        return [b"Not Found\n"]

    return app


class _MetricsServer(WSGIServer):
    """Single-threaded WSGI server with a per-connection socket timeout.

    Connections are served one at a time, so a client that connects and
    never sends a request must be dropped after request_timeout seconds.
    """

    request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT

    def handle_error(self, request: Any, client_address: Any) -> None:
        if isinstance(sys.exc_info()[1], TimeoutError):
            logger.debug("Dropped idle connection from %s", client_address)
            return
        logger.warning("Error handling request from %s", client_address, exc_info=True)


class _IPv6Server(_MetricsServer):
    address_family = socket.AF_INET6


class _LoggingHandler(WSGIRequestHandler):
    """Request handler that logs through the logging module instead of stderr."""

    def setup(self) -> None:
        self.timeout = self.server.request_timeout
        super().setup()

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


def make_metrics_server(
    registry: CollectorRegistry,
    listen_address: str = DEFAULT_LISTEN_ADDRESS,
    metrics_path: str = DEFAULT_METRICS_PATH,
    request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
) -> WSGIServer:
    """Bind the listener for the metrics endpoint.

    Args:
        registry: Registry to expose.
        listen_address: ``host:port`` to listen on.
        metrics_path: Path of the metrics endpoint.
        request_timeout: Seconds a connection may stay idle before it is dropped.

    Returns:
        Bound server, not yet serving.

    Raises:
        ListenAddressError: If the listen address is invalid.
        OSError: If the listener cannot bind.
    """
    host, port = parse_listen_address(listen_address)
    server_class = _IPv6Server if ":" in host else _MetricsServer
    httpd = make_server(
        host,
        port,
        create_app(registry, metrics_path),
        server_class=server_class,
        handler_class=_LoggingHandler,
    )
    httpd.request_timeout = request_timeout
    return httpd


def serve(
    registry: CollectorRegistry,
    listen_address: str = DEFAULT_LISTEN_ADDRESS,
    metrics_path: str = DEFAULT_METRICS_PATH,
    request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
) -> None:
    """Bind the listener and serve scrapes until interrupted.

    Args:
        registry: Registry to expose.
        listen_address: ``host:port`` to listen on.
        metrics_path: Path of the metrics endpoint.
        request_timeout: Seconds a connection may stay idle before it is dropped.

    Raises:
        ListenAddressError: If the listen address is invalid.
        OSError: If the listener cannot bind.
    """
    httpd = make_metrics_server(registry, listen_address, metrics_path, request_timeout)

    with httpd:
        logger.info("Listening on %s, metrics at %s", listen_address, metrics_path)
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down")
