"""Logging configuration for ttrak."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

# Third-party loggers traced alongside ttrak at -vv
TRACED_LIBRARIES = ("httpx",)


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> None:
    """Configure logging based on verbosity level and optional file output.

    The TUI owns the terminal, so nothing is logged unless asked for. At
    DEBUG level the HTTP client's request log is routed to the same
    handlers.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file
    """
    if verbose == 0 and log_file is None:
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []
    if verbose > 0:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    names = ["ttrak"]
    if level == logging.DEBUG:
        names.extend(TRACED_LIBRARIES)
    for name in names:
        named_logger = logging.getLogger(name)
        named_logger.setLevel(level)
        for handler in handlers:
            named_logger.addHandler(handler)

    logger = logging.getLogger("ttrak")
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("")
    logger.info("=" * 60)
    logger.info(
        "ttrak starting | %s | level=%s", timestamp, logging.getLevelName(level)
    )
    logger.info("=" * 60)
