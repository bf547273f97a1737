"""Observability - structured logging."""

from .logger import LogContext, configure_logging, get_log_level

__all__ = [
    "LogContext",
    "configure_logging",
    "get_log_level",
]
