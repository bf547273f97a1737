"""Configuration management for deps-order."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

from .observability.logger import get_log_level
from .utils.exceptions import ConfigurationError


class PrintLevel(str, Enum):
    """How much to print for each ordered dependency."""

    VERBOSE = "verbose"  # name, version and path
    NORMAL = "normal"  # name only
    SHORT = "short"  # all names on a single line


@dataclass
class RunConfig:
    """
    Ordering and execution options.

    Mirrors the command-line flags; flags given on the command line
    override these values.
    """

    workspace_only: bool = False
    exec_command: str | None = None
    wait_seconds: int = 0
    print_level: PrintLevel = PrintLevel.NORMAL

    def __post_init__(self) -> None:
        if not isinstance(self.workspace_only, bool):
            raise ConfigurationError(
                f"workspace_only must be true or false, got {self.workspace_only!r}"
            )
        if self.exec_command is not None and not isinstance(self.exec_command, str):
            raise ConfigurationError(
                f"exec_command must be a string, got {self.exec_command!r}"
            )

        try:
            self.print_level = PrintLevel(self.print_level)
        except ValueError as e:
            choices = ", ".join(level.value for level in PrintLevel)
            raise ConfigurationError(
                f"Invalid print level '{self.print_level}' (expected one of: {choices})"
            ) from e

        if isinstance(self.wait_seconds, bool) or not isinstance(self.wait_seconds, int):
            raise ConfigurationError(
                f"wait_seconds must be an integer, got {self.wait_seconds!r}"
            )
        if self.wait_seconds < 0:
            raise ConfigurationError(f"wait_seconds must be >= 0, got {self.wait_seconds}")


@dataclass
class CargoConfig:
    """How to invoke cargo metadata."""

    binary: str = "cargo"
    manifest_path: Path | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    json: bool = False
    file: Path | None = None

    def __post_init__(self) -> None:
        get_log_level(self.level)


@dataclass
class OrderConfig:
    """
    Complete configuration for deps-order.

    This combines all configuration sections.
    """

    run: RunConfig = field(default_factory=RunConfig)
    cargo: CargoConfig = field(default_factory=CargoConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "OrderConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            OrderConfig instance

        Raises:
            ConfigurationError: If the file is not valid YAML or has unknown keys
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file {config_path}: {e}"
            ) from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        try:
            run = RunConfig(**(data.get("run") or {}))

            cargo_data = dict(data.get("cargo") or {})
            if cargo_data.get("manifest_path"):
                cargo_data["manifest_path"] = Path(cargo_data["manifest_path"])
            cargo = CargoConfig(**cargo_data)

            logging_data = dict(data.get("logging") or {})
            # Convert file path string to Path if present
            if logging_data.get("file"):
                logging_data["file"] = Path(logging_data["file"])
            logging = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

        return cls(run=run, cargo=cargo, logging=logging)

    @classmethod
    def from_env(cls) -> "OrderConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            DEPS_ORDER_WORKSPACE_ONLY: "1"/"true" to restrict to workspace members
            DEPS_ORDER_EXEC: Command template to run per dependency
            DEPS_ORDER_WAIT: Seconds to wait between commands
            DEPS_ORDER_PRINT: Print level (verbose, normal, short)
            CARGO: cargo executable (same variable cargo sets for subcommands)
            LOG_LEVEL: Logging level (default: WARNING)

        Returns:
            OrderConfig instance

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        workspace_only_str = os.environ.get("DEPS_ORDER_WORKSPACE_ONLY", "false").lower()
        workspace_only = workspace_only_str in ("true", "1", "yes", "on")

        wait_str = os.environ.get("DEPS_ORDER_WAIT", "0")
        try:
            wait_seconds = int(wait_str)
        except ValueError as e:
            raise ConfigurationError(
                f"DEPS_ORDER_WAIT must be an integer, got '{wait_str}'"
            ) from e

        run = RunConfig(
            workspace_only=workspace_only,
            exec_command=os.environ.get("DEPS_ORDER_EXEC") or None,
            wait_seconds=wait_seconds,
            print_level=os.environ.get("DEPS_ORDER_PRINT", PrintLevel.NORMAL.value).lower(),
        )

        return cls(
            run=run,
            cargo=CargoConfig(binary=os.environ.get("CARGO", "cargo")),
            logging=LoggingConfig(level=os.environ.get("LOG_LEVEL", "WARNING")),
        )


def load_config(config_file: Path | None = None) -> OrderConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        OrderConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return OrderConfig.from_file(config_file)
    return OrderConfig.from_env()
