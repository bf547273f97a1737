"""Structured logging for deps-order.

All diagnostics go to stderr (and optionally a file) through structlog on top
of stdlib logging. stdout is left to the dependency listing and to the output
of the commands being run, so piping ``deps-order`` into another tool works.

Per-dependency fields are bound with ``LogContext`` and merged into every
event emitted inside the block:

    with LogContext(dependency="serde"):
        logger.info("Command succeeded")   # ... dependency=serde
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from ..utils.exceptions import ConfigurationError

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class LogContext:
    """Bind key-value pairs to every log event emitted inside the block."""

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)
        self._tokens = {}


def get_log_level(level: str) -> int:
    """
    Map a level name to its numeric value.

    Args:
        level: Level name, case-insensitive (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Numeric level

    Raises:
        ConfigurationError: If the name is not a known level
    """
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level '{level}' (expected one of: {', '.join(LOG_LEVELS)})"
        )
    return LOG_LEVELS[name]


def _build_handlers(log_file: str | Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def _processors(json_logs: bool) -> list[Processor]:
    renderer: Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(
    level: str = "WARNING",
    json_logs: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure structlog and the root stdlib logger.

    Safe to call more than once; each call replaces the previous handlers.

    Args:
        level: Minimum level to emit
        json_logs: Render one JSON object per line instead of console output
        log_file: Also write log lines to this file
    """
    log_level = get_log_level(level)

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=_build_handlers(log_file),
        force=True,
    )

    structlog.configure(
        processors=_processors(json_logs),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
