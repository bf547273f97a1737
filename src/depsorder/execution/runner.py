"""
Action Runner - walks the ordered dependencies and acts on each one.

For every dependency, in order:
1. Print it according to the print level
2. If a command template is configured, render and execute it in the
   dependency's directory
3. If a wait is configured, sleep before moving to the next dependency

A failing command is reported and the run continues with the next
dependency; one failure never aborts the batch.
"""

import time
from collections.abc import Callable, Sequence

import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import PrintLevel, RunConfig
from ..dependency.orderer import OrderedDependency
from ..models.results import CommandResult, RunSummary
from ..observability.logger import LogContext
from ..utils.exceptions import CommandExecutionError
from .executor import ShellExecutor, render_command

logger = structlog.get_logger(__name__)


class ActionRunner:
    """
    Executes the configured action for each dependency, strictly in sequence.
    """

    def __init__(
        self,
        config: RunConfig,
        console: Console,
        error_console: Console | None = None,
        executor: ShellExecutor | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """
        Initialize ActionRunner.

        Args:
            config: Run configuration (exec template, wait, print level)
            console: Rich console for the listing and status lines
            error_console: Console for per-dependency failures (default: stderr)
            executor: Command executor (default: ShellExecutor)
            sleep: Sleep function for the wait between dependencies (default: time.sleep)
        """
        self.config = config
        self.console = console
        self.error_console = error_console or Console(stderr=True)
        self.executor = executor or ShellExecutor()
        self.sleep = sleep or time.sleep

    def run(self, dependencies: Sequence[OrderedDependency]) -> RunSummary:
        """
        Print and optionally execute the command for every dependency.

        Args:
            dependencies: Dependencies in leaf-first order

        Returns:
            RunSummary with one CommandResult per executed command
        """
        summary = RunSummary(listed=len(dependencies))

        if self.config.print_level == PrintLevel.SHORT and dependencies:
            self._print_line(" ".join(dep.name for dep in dependencies))

        for index, dependency in enumerate(dependencies):
            self._print_dependency(dependency)

            if self.config.exec_command:
                summary.results.append(self.execute(dependency))

            is_last = index == len(dependencies) - 1
            if self.config.wait_seconds > 0 and not is_last:
                self._print_line(
                    f"Waiting for {self.config.wait_seconds} seconds before next command..."
                )
                self.sleep(self.config.wait_seconds)

        logger.info(
            "Run complete",
            listed=summary.listed,
            executed=summary.executed,
            failed=summary.failed,
        )

        return summary

    def execute(self, dependency: OrderedDependency) -> CommandResult:
        """
        Render and run the command template for one dependency.

        Failures are reported to the error console and returned as an
        unsuccessful CommandResult, never raised.
        """
        command = render_command(self.config.exec_command or "", dependency)

        with LogContext(dependency=dependency.name):
            self.console.print(
                f"[bold blue]Executing[/bold blue] {escape(command)} "
                f"[dim]in {escape(str(dependency.path))}[/dim]",
                soft_wrap=True,
            )
            start = time.perf_counter()

            try:
                returncode = self.executor.run(command, dependency.path)
            except CommandExecutionError as e:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.debug("Command failed", command=command, error=str(e))
                self.error_console.print(
                    f"[red]Error executing command for '{escape(dependency.name)}':[/red] "
                    f"{escape(str(e))}",
                    soft_wrap=True,
                )
                return CommandResult(
                    name=dependency.name,
                    command=command,
                    success=False,
                    returncode=e.returncode,
                    error_message=str(e),
                    duration_ms=duration_ms,
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.info("Command succeeded", command=command, duration_ms=round(duration_ms))
            self.console.print(f"[green]OK:[/green] {escape(dependency.name)}", soft_wrap=True)

        return CommandResult(
            name=dependency.name,
            command=command,
            success=True,
            returncode=returncode,
            duration_ms=duration_ms,
        )

    def print_summary(self, summary: RunSummary) -> None:
        """Print a table of command outcomes (only when commands were executed)."""
        if not summary.executed:
            return

        table = Table(title="Execution Summary")
        table.add_column("Dependency", style="cyan")
        table.add_column("Status")
        table.add_column("Duration", justify="right")

        for result in summary.results:
            status = "[green]OK[/green]" if result.success else "[red]FAILED[/red]"
            duration = "-"
            if result.duration_ms is not None:
                duration = f"{result.duration_ms / 1000:.1f}s"
            table.add_row(escape(result.name), status, duration)

        self.console.print(table)
        self.console.print(
            f"Executed: {summary.executed}  "
            f"Succeeded: [green]{summary.succeeded}[/green]  "
            f"Failed: [red]{summary.failed}[/red]"
        )
        if summary.failed_names:
            self.console.print(
                f"[red]Failed dependencies:[/red] {escape(', '.join(summary.failed_names))}",
                soft_wrap=True,
            )

    def _print_dependency(self, dependency: OrderedDependency) -> None:
        level = self.config.print_level
        if level == PrintLevel.NORMAL:
            self._print_line(dependency.name)
        elif level == PrintLevel.VERBOSE:
            self._print_line(f"{dependency.name} {dependency.version} {dependency.path}")

    def _print_line(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)
