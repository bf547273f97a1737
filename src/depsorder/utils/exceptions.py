"""Custom exceptions for deps-order.

Exception Hierarchy:
-------------------
DepsOrderError (base)
├── GraphUnavailableError    # cargo metadata could not produce a resolved graph
├── CommandExecutionError    # --exec command failed to spawn or exited non-zero
└── ConfigurationError       # Invalid configuration file or values

Error Recovery Strategy:
-----------------------
- GraphUnavailableError is fatal: the CLI reports it and exits with code 1
  before any ordering happens.
- CommandExecutionError is contained per dependency: the runner logs it with
  the dependency name and continues with the next dependency.
- References that cannot be resolved to a package are dropped silently
  (logged at debug level), they never raise.
"""


class DepsOrderError(Exception):
    """Base exception for all deps-order errors."""

    pass


class GraphUnavailableError(DepsOrderError):
    """Raised when the resolved dependency graph cannot be obtained."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize GraphUnavailableError.

        Args:
            message: Error message.
            original_error: Optional original exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error


class CommandExecutionError(DepsOrderError):
    """Raised when a rendered command cannot be spawned or exits non-zero."""

    def __init__(
        self, command: str, returncode: int | None = None, reason: str | None = None
    ) -> None:
        """
        Initialize CommandExecutionError.

        Args:
            command: The rendered command line.
            returncode: Exit status, None when the process could not be spawned.
            reason: Optional detail (e.g. the OSError message on spawn failure).
        """
        if returncode is None:
            message = f"Failed to execute command: {command}"
            if reason:
                message = f"{message} ({reason})"
        else:
            message = f"Command '{command}' exited with status {returncode}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.reason = reason


class ConfigurationError(DepsOrderError):
    """Raised when configuration is invalid."""

    pass
