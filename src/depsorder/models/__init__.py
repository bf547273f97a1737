"""Data models."""

from .results import CommandResult, RunSummary

__all__ = ["CommandResult", "RunSummary"]
