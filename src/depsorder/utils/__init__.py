"""Utility functions and exceptions."""

from .exceptions import (
    CommandExecutionError,
    ConfigurationError,
    DepsOrderError,
    GraphUnavailableError,
)

__all__ = [
    "DepsOrderError",
    "GraphUnavailableError",
    "CommandExecutionError",
    "ConfigurationError",
]
