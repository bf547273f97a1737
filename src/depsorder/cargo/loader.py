"""Metadata Loader - obtains the resolved dependency graph from cargo.

Runs ``cargo metadata --format-version 1`` for the current project,
validates the JSON with the models in :mod:`.models` and converts it into a
:class:`~depsorder.dependency.graph.DependencyGraph`.

Every failure on the way (cargo missing, non-zero exit, unparsable output,
missing ``resolve`` section) is reported as GraphUnavailableError, which is
fatal for the run.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path

import structlog
from pydantic import ValidationError

from ..dependency.graph import DependencyGraph, GraphNode, PackageId, PackageRecord
from ..utils.exceptions import GraphUnavailableError
from .models import CargoMetadata

logger = structlog.get_logger(__name__)

METADATA_FORMAT_VERSION = "1"


@dataclass
class LoadedProject:
    """Resolved graph plus the dev-dependency names of the project."""

    graph: DependencyGraph
    dev_dependency_names: frozenset[str]


def build_graph(metadata: CargoMetadata) -> DependencyGraph:
    """
    Build a DependencyGraph from validated cargo metadata.

    Args:
        metadata: Parsed cargo metadata

    Returns:
        DependencyGraph with packages in cargo's package order

    Raises:
        GraphUnavailableError: If the metadata has no resolve section
    """
    if metadata.resolve is None:
        raise GraphUnavailableError(
            "Failed to resolve dependencies: metadata has no resolve graph"
        )

    packages = [
        PackageRecord(
            id=PackageId(package.id),
            name=package.name,
            version=package.version,
            manifest_path=Path(package.manifest_path),
        )
        for package in metadata.packages
    ]
    nodes = [
        GraphNode(
            id=PackageId(node.id),
            dependencies=tuple(PackageId(dep_id) for dep_id in node.edge_ids()),
        )
        for node in metadata.resolve.nodes
    ]

    graph = DependencyGraph(
        packages=packages,
        nodes=nodes,
        workspace_member_ids=frozenset(PackageId(m) for m in metadata.workspace_members),
    )

    logger.info(
        "Dependency graph built",
        packages=len(graph.packages),
        nodes=len(graph.nodes),
        workspace_members=len(graph.workspace_member_ids),
    )

    return graph


def collect_dev_dependency_names(metadata: CargoMetadata) -> frozenset[str]:
    """
    Names of every dependency declared with kind "dev" by any package.

    Args:
        metadata: Parsed cargo metadata

    Returns:
        Set of package names
    """
    return frozenset(
        dependency.name
        for package in metadata.packages
        for dependency in package.dependencies
        if dependency.is_dev
    )


class MetadataLoader:
    """
    Loads cargo metadata for a project.

    Usage:
        project = MetadataLoader(manifest_path=Path("Cargo.toml")).load()
        order(project.graph, project.dev_dependency_names, workspace_only=True)
    """

    def __init__(
        self,
        cargo: str = "cargo",
        manifest_path: Path | None = None,
        cwd: Path | None = None,
    ) -> None:
        """
        Initialize MetadataLoader.

        Args:
            cargo: cargo executable to invoke
            manifest_path: Optional Cargo.toml to pass as --manifest-path
            cwd: Working directory for cargo (default: current directory)
        """
        self.cargo = cargo
        self.manifest_path = manifest_path
        self.cwd = cwd

    def command(self) -> list[str]:
        """Build the cargo metadata command line."""
        args = [self.cargo, "metadata", "--format-version", METADATA_FORMAT_VERSION]
        if self.manifest_path is not None:
            args.extend(["--manifest-path", str(self.manifest_path)])
        return args

    def fetch(self) -> CargoMetadata:
        """
        Run cargo metadata and validate its output.

        Returns:
            Parsed CargoMetadata

        Raises:
            GraphUnavailableError: If cargo cannot be run, fails, or prints invalid output
        """
        args = self.command()
        logger.debug("Running cargo metadata", command=args, cwd=str(self.cwd or "."))

        try:
            result = subprocess.run(
                args,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise GraphUnavailableError(
                f"Failed to retrieve cargo metadata: could not run '{self.cargo}': {e}",
                original_error=e,
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise GraphUnavailableError(
                f"Failed to retrieve cargo metadata (exit status {result.returncode})"
                + (f": {stderr}" if stderr else "")
            )

        try:
            return CargoMetadata.model_validate_json(result.stdout)
        except ValidationError as e:
            logger.error(
                "Cargo metadata validation failed",
                error_count=e.error_count(),
                validation_errors=e.errors(include_url=False),
            )
            raise GraphUnavailableError(
                f"Failed to parse cargo metadata: {e}", original_error=e
            ) from e

    def load(self) -> LoadedProject:
        """
        Fetch metadata and build the project graph.

        Returns:
            LoadedProject with the graph and dev-dependency names

        Raises:
            GraphUnavailableError: If the resolved graph cannot be obtained
        """
        metadata = self.fetch()
        return LoadedProject(
            graph=build_graph(metadata),
            dev_dependency_names=collect_dev_dependency_names(metadata),
        )
