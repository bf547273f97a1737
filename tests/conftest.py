"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Graph fixtures: small hand-built dependency graphs
- Metadata fixtures: cargo metadata documents as cargo prints them
- Console fixtures: rich consoles writing to in-memory buffers
"""

import io
import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from src.depsorder.dependency.graph import DependencyGraph
from tests.helpers import APP_ID, CORE_ID, REGISTRY_SRC, SERDE_ID, TEMPFILE_ID, make_graph

# =============================================================================
# Graph Fixtures
# =============================================================================


@pytest.fixture
def diamond_graph() -> DependencyGraph:
    """A depends on B and C, both depend on D; E depends on D."""
    return make_graph(
        {
            "A": ["B", "C"],
            "B": ["D"],
            "C": ["D"],
            "D": [],
            "E": ["D"],
        }
    )


# =============================================================================
# Cargo Metadata Fixtures
# =============================================================================


@pytest.fixture
def cargo_metadata() -> dict[str, Any]:
    """Workspace with members ``app`` and ``core``.

    app -> core, serde
    core -> serde, tempfile (dev-dependency)
    """
    return {
        "packages": [
            {
                "name": "app",
                "version": "0.1.0",
                "id": APP_ID,
                "source": None,
                "manifest_path": "/ws/app/Cargo.toml",
                "dependencies": [
                    {"name": "core", "kind": None, "req": "*", "optional": False},
                    {"name": "serde", "kind": None, "req": "^1", "optional": False},
                ],
                "features": {},
            },
            {
                "name": "core",
                "version": "0.1.0",
                "id": CORE_ID,
                "source": None,
                "manifest_path": "/ws/core/Cargo.toml",
                "dependencies": [
                    {"name": "serde", "kind": None, "req": "^1", "optional": False},
                    {"name": "tempfile", "kind": "dev", "req": "^3", "optional": False},
                ],
                "features": {},
            },
            {
                "name": "serde",
                "version": "1.0.200",
                "id": SERDE_ID,
                "source": "registry+https://github.com/rust-lang/crates.io-index",
                "manifest_path": f"{REGISTRY_SRC}/serde-1.0.200/Cargo.toml",
                "dependencies": [],
                "features": {},
            },
            {
                "name": "tempfile",
                "version": "3.10.1",
                "id": TEMPFILE_ID,
                "source": "registry+https://github.com/rust-lang/crates.io-index",
                "manifest_path": f"{REGISTRY_SRC}/tempfile-3.10.1/Cargo.toml",
                "dependencies": [],
                "features": {},
            },
        ],
        "workspace_members": [APP_ID, CORE_ID],
        "resolve": {
            "nodes": [
                {
                    "id": APP_ID,
                    "dependencies": [CORE_ID, SERDE_ID],
                    "deps": [
                        {"name": "core", "pkg": CORE_ID, "dep_kinds": [{"kind": None}]},
                        {"name": "serde", "pkg": SERDE_ID, "dep_kinds": [{"kind": None}]},
                    ],
                    "features": [],
                },
                {
                    "id": CORE_ID,
                    "dependencies": [SERDE_ID, TEMPFILE_ID],
                    "deps": [
                        {"name": "serde", "pkg": SERDE_ID, "dep_kinds": [{"kind": None}]},
                        {"name": "tempfile", "pkg": TEMPFILE_ID, "dep_kinds": [{"kind": "dev"}]},
                    ],
                    "features": [],
                },
                {"id": SERDE_ID, "dependencies": [], "deps": [], "features": []},
                {"id": TEMPFILE_ID, "dependencies": [], "deps": [], "features": []},
            ],
            "root": None,
        },
        "target_directory": "/ws/target",
        "version": 1,
        "workspace_root": "/ws",
    }


@pytest.fixture
def cargo_metadata_json(cargo_metadata: dict[str, Any]) -> str:
    """Cargo metadata serialized as cargo prints it."""
    return json.dumps(cargo_metadata)


@pytest.fixture
def completed_metadata(cargo_metadata_json: str) -> MagicMock:
    """Successful subprocess.run result for cargo metadata."""
    result = MagicMock()
    result.returncode = 0
    result.stdout = cargo_metadata_json
    result.stderr = ""
    return result


# =============================================================================
# Console Fixtures
# =============================================================================


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def error_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """Plain console writing to ``output``."""
    return Console(file=output, width=200, color_system=None, force_terminal=False)


@pytest.fixture
def error_console(error_output: io.StringIO) -> Console:
    """Plain console writing to ``error_output``."""
    return Console(file=error_output, width=200, color_system=None, force_terminal=False)
