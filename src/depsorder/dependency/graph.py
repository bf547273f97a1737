"""Dependency Graph - resolved package graph of a Cargo project.

Stores packages and resolved nodes in an arena (plain lists) with a
PackageId -> index map for lookups. Edges are kept as PackageIds in the
order the resolver reported them, so traversals are deterministic.
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, order=True)
class PackageId:
    """
    Opaque package identifier (package version + source).

    Identity is exact string equality of ``value``.
    """

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageRecord:
    """
    Descriptive metadata for a package.

    Attributes:
        id: Package identifier
        name: Package name (unique within one resolved graph)
        version: Semantic version string
        manifest_path: Path to the package's Cargo.toml
    """

    id: PackageId
    name: str
    version: str
    manifest_path: Path

    @property
    def path(self) -> Path:
        """Directory containing the package manifest."""
        return self.manifest_path.parent


@dataclass(frozen=True)
class GraphNode:
    """
    Resolved node: a package and the ids of its dependencies.

    Edges may point at ids that have no node in the graph.
    """

    id: PackageId
    dependencies: tuple[PackageId, ...] = ()


@dataclass
class DependencyGraph:
    """
    Resolved dependency graph plus the package and workspace member sets.

    Packages and nodes live in arenas; ``_package_index`` and ``_node_index``
    map a PackageId to its position. ``packages`` keeps the order reported
    by cargo, which is the iteration order used to pick traversal roots.
    """

    packages: list[PackageRecord] = field(default_factory=list)
    nodes: list[GraphNode] = field(default_factory=list)
    workspace_member_ids: frozenset[PackageId] = frozenset()
    _package_index: dict[PackageId, int] = field(default_factory=dict, init=False, repr=False)
    _node_index: dict[PackageId, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.workspace_member_ids = frozenset(self.workspace_member_ids)
        packages, nodes = self.packages, self.nodes
        self.packages, self.nodes = [], []
        for package in packages:
            self.add_package(package)
        for node in nodes:
            self.add_node(node)

    def add_package(self, package: PackageRecord) -> None:
        """
        Add a package record.

        Args:
            package: Package to add. A duplicate id is ignored.
        """
        if package.id in self._package_index:
            logger.warning("Package already in graph", package_id=str(package.id))
            return
        self._package_index[package.id] = len(self.packages)
        self.packages.append(package)

    def add_node(self, node: GraphNode) -> None:
        """
        Add a resolved node.

        Args:
            node: Node to add. A duplicate id is ignored.
        """
        if node.id in self._node_index:
            logger.warning("Node already in graph", package_id=str(node.id))
            return
        self._node_index[node.id] = len(self.nodes)
        self.nodes.append(node)

    @property
    def all_package_ids(self) -> list[PackageId]:
        """Every known package id, in package list order."""
        return [package.id for package in self.packages]

    def get_package(self, package_id: PackageId) -> PackageRecord | None:
        index = self._package_index.get(package_id)
        return None if index is None else self.packages[index]

    def get_node(self, package_id: PackageId) -> GraphNode | None:
        index = self._node_index.get(package_id)
        return None if index is None else self.nodes[index]

    def has_node(self, package_id: PackageId) -> bool:
        return package_id in self._node_index

    def is_workspace_member(self, package_id: PackageId) -> bool:
        return package_id in self.workspace_member_ids

    def to_dot(self, workspace_only: bool = False) -> str:
        """
        Generate DOT format representation of the dependency graph.

        Edges point from a dependency to its dependent, so Graphviz lays the
        graph out in execution order.

        Args:
            workspace_only: Only include workspace members and edges between them

        Returns:
            String containing the Graphviz DOT definition
        """
        lines = ["digraph DependencyGraph {"]
        lines.append("    rankdir=LR;")
        lines.append("    node [shape=box style=filled];")

        for node in self.nodes:
            member = self.is_workspace_member(node.id)
            if workspace_only and not member:
                continue

            package = self.get_package(node.id)
            label = f"{package.name}\\n{package.version}" if package else str(node.id)

            # Workspace members green, external crates gray
            color = "#d4edda" if member else "#eeeeee"

            lines.append(f'    "{node.id}" [label="{label}" fillcolor="{color}"];')

            for dep_id in node.dependencies:
                if not self.has_node(dep_id):
                    continue
                if workspace_only and not self.is_workspace_member(dep_id):
                    continue
                lines.append(f'    "{dep_id}" -> "{node.id}";')

        lines.append("}")
        return "\n".join(lines)
