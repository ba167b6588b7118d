"""CLI entry point for ttrak."""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ttrak",
        description="Terminal task tracker with GitHub and Linear sync",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding config.yml and data.json (default: ~/.config/ttrak)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Build settings from CLI args; unset flags fall back to TTRAK_* env vars."""
    settings_kwargs: dict = {}
    if args.config_dir:
        settings_kwargs["config_dir"] = args.config_dir.expanduser()
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file
    return Settings(**settings_kwargs)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = build_settings(args)

    # Setup logging based on verbosity
    setup_logging(settings.verbose, settings.log_file)

    # Import here to keep --version and --help fast
    from .app import run

    try:
        run(settings)
    except OSError as e:
        logger.error("Fatal storage error: %s", e)
        print(f"ttrak: could not save data in {settings.config_dir}: {e}", file=sys.stderr)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
