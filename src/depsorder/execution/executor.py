"""Command Executor - renders command templates and runs them in a shell."""

import os
import subprocess
from pathlib import Path

import structlog

from ..dependency.orderer import OrderedDependency
from ..utils.exceptions import CommandExecutionError

logger = structlog.get_logger(__name__)

NAME_PLACEHOLDER = "{}"
VERSION_PLACEHOLDER = "{version}"
PATH_PLACEHOLDER = "{path}"


def render_command(template: str, dependency: OrderedDependency) -> str:
    """
    Substitute dependency fields into a command template.

    Plain text replacement, applied in order: ``{}`` → name,
    ``{version}`` → version, ``{path}`` → directory. Other braces are
    left untouched.

    Example:
        render_command("echo {} {version} {path}", dep)
        # "echo foo 1.2.3 /p"
    """
    return (
        template.replace(NAME_PLACEHOLDER, dependency.name)
        .replace(VERSION_PLACEHOLDER, dependency.version)
        .replace(PATH_PLACEHOLDER, str(dependency.path))
    )


def shell_command(command: str) -> list[str]:
    """Wrap a command line for the platform shell (``sh -c`` or ``cmd /C``)."""
    if os.name == "nt":
        return ["cmd", "/C", command]
    return ["sh", "-c", command]


class ShellExecutor:
    """
    Runs rendered commands through the platform shell.

    The child inherits stdout and stderr, so command output streams straight
    to the terminal.
    """

    def run(self, command: str, cwd: Path) -> int:
        """
        Run a command and wait for it to finish.

        Args:
            command: Rendered command line
            cwd: Working directory for the command

        Returns:
            Exit status (always 0, non-zero raises)

        Raises:
            CommandExecutionError: If the command cannot be spawned or exits non-zero
        """
        logger.debug("Spawning command", command=command, cwd=str(cwd))

        try:
            completed = subprocess.run(shell_command(command), cwd=cwd, check=False)
        except OSError as e:
            raise CommandExecutionError(command, reason=str(e)) from e

        if completed.returncode != 0:
            raise CommandExecutionError(command, returncode=completed.returncode)

        return completed.returncode
