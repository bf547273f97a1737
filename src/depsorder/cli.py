"""Command-line interface for deps-order."""

import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .cargo.loader import LoadedProject, MetadataLoader
from .config import OrderConfig, PrintLevel, RunConfig, load_config
from .constants import APP_NAME, CARGO_SUBCOMMAND, DEFAULT_COMMAND, VERSION
from .dependency.orderer import list_dependencies
from .execution.runner import ActionRunner
from .observability import configure_logging
from .utils.exceptions import ConfigurationError, GraphUnavailableError

app = typer.Typer(
    name=APP_NAME,
    help="List the dependencies of a Cargo project leaf-first and run commands on each one.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)
logger = structlog.get_logger(__name__)


def _fail(error: Exception) -> typer.Exit:
    err_console.print(f"[bold red]ERROR:[/bold red] {escape(str(error))}", soft_wrap=True)
    return typer.Exit(code=1)


def _load_config(config_file: Path | None) -> OrderConfig:
    try:
        return load_config(config_file)
    except (ConfigurationError, FileNotFoundError) as e:
        raise _fail(e) from e


def _configure_logging(config: OrderConfig, log_level: str | None) -> None:
    try:
        configure_logging(
            level=log_level or config.logging.level,
            json_logs=config.logging.json,
            log_file=config.logging.file,
        )
    except ConfigurationError as e:
        raise _fail(e) from e


def _load_project(config: OrderConfig, manifest_path: Path | None) -> LoadedProject:
    loader = MetadataLoader(
        cargo=config.cargo.binary,
        manifest_path=manifest_path or config.cargo.manifest_path,
    )
    try:
        return loader.load()
    except GraphUnavailableError as e:
        logger.debug("Dependency graph unavailable", error=str(e))
        raise _fail(e) from e


@app.command("order")
def order_command(
    workspace_only: bool = typer.Option(
        False, "--workspace-only", help="Show only dependencies within the workspace"
    ),
    exec_command: str | None = typer.Option(
        None,
        "--exec",
        metavar="COMMAND",
        help=(
            "Command to execute for each dependency. '{}', '{version}' and '{path}' are "
            "replaced with the name, version and path of the dependency."
        ),
    ),
    wait: int | None = typer.Option(
        None,
        "--wait",
        min=0,
        metavar="SECONDS",
        help="Number of seconds to wait between executing commands for each dependency",
    ),
    print_level: PrintLevel | None = typer.Option(
        None,
        "--print",
        "-p",
        case_sensitive=False,
        help="Verbosity of the dependency listing (default: normal)",
    ),
    manifest_path: Path | None = typer.Option(
        None, "--manifest-path", help="Path to Cargo.toml (default: current project)"
    ),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log verbosity: DEBUG, INFO, WARNING, ERROR",
    ),
    summary: bool = typer.Option(
        True, "--summary/--no-summary", help="Print a summary table after executing commands"
    ),
) -> None:
    """
    List dependencies leaf-first and optionally execute a command for each.

    Every dependency is listed before the packages that depend on it. A
    failing command is reported and the remaining dependencies still run.

    Examples:
        deps-order --workspace-only
        deps-order --workspace-only --exec "cargo publish" --wait 30
        deps-order -p verbose --exec "echo {} {version} {path}"
    """
    config = _load_config(config_file)

    _configure_logging(config, log_level)

    try:
        run_config = RunConfig(
            workspace_only=workspace_only or config.run.workspace_only,
            exec_command=exec_command if exec_command is not None else config.run.exec_command,
            wait_seconds=wait if wait is not None else config.run.wait_seconds,
            print_level=print_level or config.run.print_level,
        )
    except ConfigurationError as e:
        raise _fail(e) from e

    project = _load_project(config, manifest_path)

    dependencies = list_dependencies(
        project.graph, project.dev_dependency_names, run_config.workspace_only
    )

    runner = ActionRunner(run_config, console, err_console)
    result = runner.run(dependencies)

    if summary:
        runner.print_summary(result)


@app.command("graph")
def graph_command(
    workspace_only: bool = typer.Option(
        False, "--workspace-only", help="Only include workspace members"
    ),
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="Write DOT to this file instead of stdout"
    ),
    manifest_path: Path | None = typer.Option(
        None, "--manifest-path", help="Path to Cargo.toml (default: current project)"
    ),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log verbosity: DEBUG, INFO, WARNING, ERROR",
    ),
) -> None:
    """
    Output the resolved dependency graph in Graphviz DOT format.

    Examples:
        deps-order graph --workspace-only | dot -Tsvg > deps.svg
        deps-order graph -o deps.dot
    """
    config = _load_config(config_file)
    _configure_logging(config, log_level)

    project = _load_project(config, manifest_path)
    dot = project.graph.to_dot(workspace_only=workspace_only or config.run.workspace_only)

    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(dot + "\n", encoding="utf-8")
        console.print(f"[green]Dependency graph written to {output_file}[/green]")
    else:
        console.print(dot, markup=False, highlight=False, soft_wrap=True)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel.fit(
            f"[bold]{APP_NAME}[/bold]\n\n"
            f"Version: [cyan]{VERSION}[/cyan]\n"
            f"Python: {sys.version_info.major}.{sys.version_info.minor}",
            title="About",
            border_style="blue",
        )
    )


def normalize_args(argv: list[str]) -> list[str]:
    """
    Adapt raw arguments for the Typer app.

    Drops the leading ``deps-order`` argument cargo passes when invoked as
    ``cargo deps-order`` and inserts the default ``order`` command when the
    first argument is not a command name.
    """
    args = list(argv)
    if args and args[0] == CARGO_SUBCOMMAND:
        args = args[1:]

    commands = {"order", "graph", "version"}
    if not args or (args[0] not in commands and args[0] != "--help"):
        args = [DEFAULT_COMMAND, *args]

    return args


def main() -> None:
    """Console script entry point."""
    app(args=normalize_args(sys.argv[1:]), prog_name=APP_NAME)


if __name__ == "__main__":
    main()
