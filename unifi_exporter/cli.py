"""
Command line entry point: serves UniFi Controller metrics over HTTP.
"""

import argparse
import socket
import sys
from typing import Callable, List, Optional
from wsgiref.simple_server import WSGIRequestHandler, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer

from . import __version__
from .api_client import UnifiController
from .config import ExporterConfig, parse_listen_address
from .exceptions import UnifiExporterError
from .exporter import Exporter, pick_sites, sites_string
from .logging import configure_logging, get_logger

logger = get_logger(__name__)

USER_AGENT = f"unifi_exporter/{__version__}"


def new_client_factory(config: ExporterConfig) -> Callable[[], UnifiController]:
    """
    Return a function creating a freshly authenticated client from the configuration.

    The Exporter calls it again whenever the controller session is lost.
    """
    def factory() -> UnifiController:
        client = UnifiController(
            config.controller_url,
            is_udm_pro=config.unifi_os,
            verify_ssl=not config.insecure,
            timeout=config.timeout,
            user_agent=USER_AGENT,
        )
        client.login(config.username, config.password)
        return client

    return factory


def create_app(registry: CollectorRegistry, metrics_path: str):
    """
    Create the WSGI application.

    ``metrics_path`` serves the exposition format; every other path redirects to it.
    """
    metrics_app = make_wsgi_app(registry)

    def app(environ, start_response):
        if environ.get("PATH_INFO", "/") == metrics_path:
            return metrics_app(environ, start_response)
        start_response("301 Moved Permanently", [
            ("Location", metrics_path),
            ("Content-Type", "text/plain; charset=utf-8"),
        ])
        return [f"Moved to {metrics_path}\n".encode("utf-8")]

    return app


class _LoggingRequestHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")


class _IPv6WSGIServer(ThreadingWSGIServer):
    address_family = socket.AF_INET6


def make_metrics_server(host: str, port: int, app):
    """
    Bind a threaded WSGI server for ``app``.

    Hosts containing a colon are IPv6 addresses and get an IPv6 socket.

    Raises:
        OSError: If the address cannot be bound.
    """
    server_class = _IPv6WSGIServer if ":" in host else ThreadingWSGIServer
    return make_server(host, port, app, server_class,
                       handler_class=_LoggingRequestHandler)


def build_exporter(config: ExporterConfig) -> Exporter:
    """
    Log in, select the sites to export and build the Exporter.

    Raises:
        UnifiExporterError: If the controller cannot be reached or logged in to.
        LookupError: If the configured site does not exist.
    """
    client_factory = new_client_factory(config)
    client = client_factory()
    sites = pick_sites(config.site, client.list_sites())
    return Exporter(
        sites,
        client_factory,
        reauth_on_any_error=config.reauth_on_any_error,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="unifi-exporter",
        description="Prometheus exporter for a Ubiquiti UniFi Controller API and UniFi devices.",
    )
    parser.add_argument(
        "--config.file", dest="config_file", required=True,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = ExporterConfig.from_file(args.config_file)
        exporter = build_exporter(config)
    except (UnifiExporterError, LookupError) as e:
        logger.error(f"Failed to start UniFi exporter: {e}")
        return 1

    registry = CollectorRegistry()
    registry.register(exporter)

    host, port = parse_listen_address(config.listen_address)
    app = create_app(registry, config.metrics_path)
    try:
        httpd = make_metrics_server(host, port, app)
    except OSError as e:
        logger.error(f"Failed to listen on {config.listen_address!r}: {e}")
        return 1

    logger.info(
        f"Starting UniFi exporter on {config.listen_address!r} for site(s): {sites_string(exporter.sites)}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down UniFi exporter")
    finally:
        httpd.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
