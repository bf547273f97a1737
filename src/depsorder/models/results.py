"""Result types for command execution."""

from dataclasses import dataclass, field


@dataclass
class CommandResult:
    """
    Result of executing the command for a single dependency.

    Attributes:
        name: Dependency name
        command: Rendered command line
        success: Whether the command ran and exited with status 0
        returncode: Exit status (None when the command could not be spawned)
        error_message: Error details if failed
        duration_ms: Command duration in milliseconds
    """

    name: str
    command: str
    success: bool
    returncode: int | None = None
    error_message: str | None = None
    duration_ms: float | None = None


@dataclass
class RunSummary:
    """Outcome of one ordering + execution run."""

    listed: int = 0
    results: list[CommandResult] = field(default_factory=list)

    @property
    def executed(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return self.executed - self.succeeded

    @property
    def failed_names(self) -> list[str]:
        return [result.name for result in self.results if not result.success]
