"""Command-line entry point serving the monitor API."""
from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Sequence

import uvicorn

from queue_monitor.app import create_app
from queue_monitor.config import BACKEND_REDIS, BACKEND_TYPES, Settings, load_settings
from queue_monitor.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("queue-monitor")
    except PackageNotFoundError:
        return "dev"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="queue-monitor", description="Read-only dashboard API for a task queue")
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--host", help="HTTP server host")
    parser.add_argument("--port", help="HTTP server port")
    parser.add_argument("--broker", help=f"Broker type ({', '.join(BACKEND_TYPES)})")
    parser.add_argument("--redis-addr", help="Redis address (host:port)")
    parser.add_argument("--redis-pass", help="Redis password")
    parser.add_argument("--redis-db", type=int, help="Redis database index")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--version", action="store_true", help="Show version information")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    settings.apply(
        {
            "host": args.host,
            "port": args.port,
            "backend": args.broker,
            "redis": {"addr": args.redis_addr, "password": args.redis_pass, "db": args.redis_db},
        }
    )
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print("Task Queue Monitor")
        print(f"Version: {_package_version()}")
        return 0

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = settings_from_args(args)
        settings.validate()
    except (InvalidArgumentError, OSError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    logger.info("Starting task queue monitor (broker: %s)", settings.backend)
    if settings.backend == BACKEND_REDIS:
        logger.info("Redis: %s (DB: %d)", settings.redis.addr, settings.redis.db)

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=int(settings.port), log_level=args.log_level.lower())
    logger.info("Server stopped")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
