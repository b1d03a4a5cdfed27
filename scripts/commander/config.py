"""Runtime settings, resolved once at startup and injected everywhere else."""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from commander.errors import ConfigError
from commander.linode_provider import DEFAULT_API_URL
from commander.refresher import DETAIL_REFRESH_INTERVAL, LIST_REFRESH_INTERVAL

TOKEN_ENV = "LINODE_TOKEN"
DEFAULT_LOG_FILE = Path.home() / ".linode-commander" / "commander.log"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    token: str
    api_url: str = DEFAULT_API_URL
    light_theme: bool = False
    list_interval: float = LIST_REFRESH_INTERVAL
    detail_interval: float = DETAIL_REFRESH_INTERVAL
    log_file: Path = DEFAULT_LOG_FILE
    debug: bool = False

    @classmethod
    def from_args(
        cls, args: argparse.Namespace, environ: Mapping[str, str] | None = None
    ) -> "Settings":
        """Build settings from parsed arguments and the environment.

        Raises:
            ConfigError: If no token is available or an interval is not positive.
        """
        environ = os.environ if environ is None else environ
        token = environ.get(TOKEN_ENV, "").strip()
        if not token:
            raise ConfigError(f"Could not find {TOKEN_ENV}, please make sure it is set.")

        for name in ("list_interval", "detail_interval"):
            if getattr(args, name) <= 0:
                raise ConfigError(f"--{name.replace('_', '-')} must be positive")

        return cls(
            token=token,
            api_url=args.api_url,
            light_theme=args.light_theme,
            list_interval=args.list_interval,
            detail_interval=args.detail_interval,
            log_file=args.log_file,
            debug=args.debug,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lc",
        description="Linode Commander - inspect and control your Linodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"The API token is read from ${TOKEN_ENV}.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print instances once and exit (no TUI)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print instances as JSON and exit",
    )
    parser.add_argument(
        "--light-theme",
        action="store_true",
        help="Use the light theme",
    )
    parser.add_argument(
        "--api-url",
        default=DEFAULT_API_URL,
        help=f"API base URL (default: {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--list-interval",
        type=float,
        default=LIST_REFRESH_INTERVAL,
        help="Seconds between instance list refreshes",
    )
    parser.add_argument(
        "--detail-interval",
        type=float,
        default=DETAIL_REFRESH_INTERVAL,
        help="Seconds between instance detail refreshes",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help=f"Log file path (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser
