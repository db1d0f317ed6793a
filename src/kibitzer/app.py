"""Application entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from kibitzer import __version__
from kibitzer.config import ClientSettings
from kibitzer.core.errors import ConfigError

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kibitzer",
        description="Play chess against a remote engine and watch its log.",
    )
    parser.add_argument(
        "--backend-url",
        help="Engine service base URL (env: KIBITZER_BACKEND_URL).",
    )
    parser.add_argument(
        "--request-delay-ms",
        type=int,
        help="Delay before asking the engine for a reply (default 500).",
    )
    parser.add_argument(
        "--timeout-ms",
        dest="request_timeout_ms",
        type=int,
        help="HTTP transfer timeout in milliseconds (default 15000).",
    )
    parser.add_argument(
        "--max-retries",
        dest="max_transport_retries",
        type=int,
        help="Transport-level retries for engine move requests (default 1).",
    )
    parser.add_argument(
        "--reconnect-attempts",
        dest="reconnection_attempts",
        type=int,
        help="Log stream reconnection attempts (default 5).",
    )
    parser.add_argument(
        "--reconnect-delay-ms",
        dest="reconnection_delay_ms",
        type=int,
        help="Delay between log stream reconnection attempts (default 1000).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Diagnostic logging level (env: KIBITZER_LOG_LEVEL).",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def load_settings(
    argv: list[str] | None = None, environ: dict[str, str] | None = None
) -> ClientSettings:
    """Resolve settings: defaults, then environment, then command line."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = ClientSettings.from_env(os.environ if environ is None else environ)
        return settings.with_overrides(
            backend_url=args.backend_url,
            request_delay_ms=args.request_delay_ms,
            request_timeout_ms=args.request_timeout_ms,
            max_transport_retries=args.max_transport_retries,
            reconnection_attempts=args.reconnection_attempts,
            reconnection_delay_ms=args.reconnection_delay_ms,
            log_level=args.log_level,
        )
    except ConfigError as exc:
        parser.error(str(exc))


def main(argv: list[str] | None = None) -> None:
    """Launch the Kibitzer application."""
    settings = load_settings(argv)
    logging.basicConfig(level=settings.log_level, format=_LOG_FORMAT)

    from kibitzer.ui.bootstrap import run_application

    # Qt does not need our options.
    sys.exit(run_application(settings, sys.argv[:1]))


if __name__ == "__main__":
    main()
