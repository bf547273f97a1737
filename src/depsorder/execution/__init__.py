"""Execution of commands against ordered dependencies."""

from .executor import ShellExecutor, render_command, shell_command
from .runner import ActionRunner

__all__ = [
    "ActionRunner",
    "ShellExecutor",
    "render_command",
    "shell_command",
]
