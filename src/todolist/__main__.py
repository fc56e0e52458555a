"""Command-line entry point: python -m todolist [DATABASE_URL]"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from dataclasses import replace

from .errors import StorageConnectionError
from .logging_config import setup_logging
from .settings import get_settings
from .supervisor import build_supervisor

log = logging.getLogger("todolist")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="todolist",
        description="Serve the todo list over HTTP and MCP stdio until either stops.",
    )
    parser.add_argument(
        "database_url",
        nargs="?",
        default=None,
        help="SQLAlchemy URL or sqlite file path (overridden by DATABASE_URL)",
    )
    parser.add_argument("--host", default=None, help="HTTP bind host (default: HTTP_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="HTTP bind port (default: HTTP_PORT or 8000)")
    parser.add_argument("--pool-size", type=int, default=None, help="Connection pool size (default: DB_POOL_SIZE or 5)")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)
    settings = get_settings(args.database_url)
    overrides = {}
    if args.host:
        overrides["http_host"] = args.host
    if args.port is not None:
        overrides["http_port"] = args.port
    if args.pool_size is not None and args.pool_size > 0:
        overrides["pool_size"] = args.pool_size
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if overrides:
        settings = replace(settings, **overrides)

    setup_logging(settings.log_level)

    try:
        supervisor = build_supervisor(settings)
    except StorageConnectionError as exc:
        log.error("Failed to start: %s", exc)
        raise SystemExit(1)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    trigger = loop.run_until_complete(supervisor.run())
    code = 1 if supervisor.failure is not None else 0
    log.info("Stopped (%s), exit code %d", trigger.value, code)

    # The stdio reader blocks in a thread that cannot be cancelled; skip
    # interpreter teardown so the process exits without waiting on it.
    logging.shutdown()
    os._exit(code)


if __name__ == "__main__":
    main()
