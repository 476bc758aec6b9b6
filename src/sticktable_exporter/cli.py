"""
Command line entry point.

Flag names follow the exporter's historical flags (``--gpc``,
``--reqRate``, ``--instance``, ``--endpoint``, ``--port``). Any flag left
unset falls back to the STICKTABLE_EXPORTER_* environment settings.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

import structlog

from sticktable_exporter.clients import ControlSocketClient
from sticktable_exporter.config import Settings, load_settings
from sticktable_exporter.core.errors import ExitCode, main_with_error_handling
from sticktable_exporter.haproxy import TableScraper
from sticktable_exporter.logging import configure_logging
from sticktable_exporter.metrics import render_metrics

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sticktable-exporter",
        description="Export HAProxy stick tables as Prometheus metrics",
    )
    parser.add_argument("--gpc", help="The HAProxy GPC that contains the connections (default: gpc0)")
    parser.add_argument(
        "--reqRate",
        dest="req_rate",
        help="The HAProxy register that contains the request rate (default: http_req_rate(10000))",
    )
    parser.add_argument(
        "--instance", help="If specified, enhance the metrics with an 'instance' label"
    )
    parser.add_argument(
        "--endpoint", help="Endpoint that is exposed for Prometheus (default: /metrics)"
    )
    parser.add_argument("--port", type=int, help="Port to listen on (default: 9322)")
    parser.add_argument("--host", help="Address to bind (default: 0.0.0.0)")
    parser.add_argument(
        "--socket",
        dest="socket_path",
        help="HAProxy admin socket path (default: /run/haproxy/admin.sock)",
    )
    parser.add_argument(
        "--socket-timeout",
        type=float,
        help="Seconds to wait on the admin socket (default: wait forever)",
    )
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Scrape once, print the metrics to stdout and exit",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return load_settings(
        gpc=args.gpc,
        req_rate=args.req_rate,
        instance=args.instance,
        endpoint=args.endpoint,
        port=args.port,
        host=args.host,
        socket_path=args.socket_path,
        socket_timeout=args.socket_timeout,
        log_level=args.log_level,
    )


def scrape_once(settings: Settings) -> str:
    client = ControlSocketClient(settings.socket_path, timeout=settings.socket_timeout)
    return asyncio.run(render_metrics(TableScraper(client), settings.render_config()))


def serve(settings: Settings) -> None:
    import uvicorn

    from sticktable_exporter.api.main import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


@main_with_error_handling()
def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings.log_level)

    if args.once:
        sys.stdout.write(scrape_once(settings))
        return ExitCode.SUCCESS

    logger.info("serving_metrics", host=settings.host, port=settings.port, endpoint=settings.endpoint)
    serve(settings)
    return ExitCode.SUCCESS


def main(argv: Sequence[str] | None = None) -> None:
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
