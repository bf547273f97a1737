"""Constants for deps-order."""

VERSION: str = "0.1.0"

# Program name used in help output and the Click/Typer app
APP_NAME: str = "deps-order"

# cargo runs `cargo-deps-order deps-order ...` for `cargo deps-order ...`,
# passing the subcommand name as the first argument
CARGO_SUBCOMMAND: str = "deps-order"

# Command assumed when the first argument is not a known command
DEFAULT_COMMAND: str = "order"
