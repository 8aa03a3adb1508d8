#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pingdom Exporter command line.

    pingdom-exporter server [--wait N] [--port N] username password api-key [account-email]
"""
import argparse
import logging
import sys
from typing import List, Optional

from pingdom_exporter import __version__
from pingdom_exporter.client import PingdomClient
from pingdom_exporter.config import ExporterSettings
from pingdom_exporter.errors import ExporterException, UsageError
from pingdom_exporter.logging_config import LOG_FORMATS, setup_logging
from pingdom_exporter.poller import Poller
from pingdom_exporter.server import ExporterServer, create_app
from pingdom_exporter.shutdown import ShutdownWatcher
from pingdom_exporter.sinks import PrometheusMetricSink

logger = logging.getLogger(__name__)

SERVER_USAGE = (
    "%(prog)s [options] username password api-key [account-email]"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pingdom-exporter",
        description="Export Pingdom check status as Prometheus metrics",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    sp = sub.add_parser(
        "server",
        help="Start the HTTP server",
        usage=SERVER_USAGE,
        description="Poll the Pingdom API and serve the results on /metrics. "
                    "Pass an account email as fourth argument for multi-account mode.",
    )
    sp.add_argument("credentials", nargs="*", metavar="credential",
                    help="username password api-key [account-email]")
    sp.add_argument("--wait", type=int, default=10,
                    help="time (in seconds) between accessing the Pingdom API (default: 10)")
    sp.add_argument("--port", type=int, default=8000, help="port to listen on (default: 8000)")
    sp.add_argument("--host", default="0.0.0.0", help="address to bind (default: 0.0.0.0)")
    sp.add_argument("--timeout", type=float, default=None,
                    help="Pingdom request timeout in seconds (default: none)")
    sp.add_argument("--log-level", default=None,
                    help="DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)")
    sp.add_argument("--log-format", choices=LOG_FORMATS, default=None,
                    help="log output format (default: text)")
    sp.set_defaults(subparser=sp)
    return parser


def load_settings(args: argparse.Namespace) -> ExporterSettings:
    """
    Turn parsed arguments into validated settings.

    Raises:
        UsageError: Not exactly 3 or 4 credentials were given
        ConfigurationError: A value failed validation
    """
    creds: List[str] = args.credentials
    if len(creds) not in (3, 4):
        raise UsageError(
            f"expected 3 or 4 positional arguments, got {len(creds)}",
            context={"count": len(creds)},
        )
    return ExporterSettings.load(
        username=creds[0],
        password=creds[1],
        api_key=creds[2],
        account_email=creds[3] if len(creds) == 4 else None,
        wait=args.wait,
        port=args.port,
        host=args.host,
        timeout=args.timeout,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def run_server(settings: ExporterSettings) -> int:
    """Start polling and serving; only returns if the HTTP server dies."""
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"Starting pingdom-exporter {__version__}: {settings.describe()}")

    client = PingdomClient(
        settings.username,
        settings.password.get_secret_value(),
        settings.api_key.get_secret_value(),
        account_email=settings.account_email,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )
    sink = PrometheusMetricSink()
    poller = Poller(client, sink, interval=settings.wait)
    app = create_app(sink, poller)

    ShutdownWatcher().install()

    server = ExporterServer(app, host=settings.host, port=settings.port,
                            log_level=settings.log_level)
    server.start()
    server.wait()

    logger.error("HTTP server stopped unexpectedly")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "server":
        parser.print_help()
        return 1

    try:
        settings = load_settings(args)
    except UsageError:
        args.subparser.print_help()
        return 1
    except ExporterException as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    try:
        return run_server(settings)
    except ExporterException as e:
        logger.error(f"Server failed: {e.message}", extra={"error": e.to_dict()})
        return 1


if __name__ == "__main__":
    sys.exit(main())
