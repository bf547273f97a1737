"""Helpers for building dependency graphs in tests."""

from pathlib import Path

from src.depsorder.dependency.graph import DependencyGraph, GraphNode, PackageId, PackageRecord

APP_ID = "path+file:///ws/app#0.1.0"
CORE_ID = "path+file:///ws/core#0.1.0"
SERDE_ID = "registry+https://github.com/rust-lang/crates.io-index#serde@1.0.200"
TEMPFILE_ID = "registry+https://github.com/rust-lang/crates.io-index#tempfile@3.10.1"

REGISTRY_SRC = "/home/dev/.cargo/registry/src/index.crates.io-6f17d22bba15001f"


def pid(name: str) -> PackageId:
    """Package id used by the hand-built graphs."""
    return PackageId(f"registry+https://example.invalid/index#{name}@1.0.0")


def make_graph(
    edges: dict[str, list[str]],
    members: set[str] | None = None,
    without_node: set[str] | None = None,
) -> DependencyGraph:
    """Build a graph from ``{name: [dependency names]}``.

    Packages are added in dict order. Names in ``members`` become workspace
    members (default: every package). Names in ``without_node`` get a package
    record but no resolved node.
    """
    members = set(edges) if members is None else members
    without_node = without_node or set()

    packages = [
        PackageRecord(
            id=pid(name),
            name=name,
            version="1.0.0",
            manifest_path=Path("/ws") / name / "Cargo.toml",
        )
        for name in edges
    ]
    nodes = [
        GraphNode(id=pid(name), dependencies=tuple(pid(dep) for dep in deps))
        for name, deps in edges.items()
        if name not in without_node
    ]
    return DependencyGraph(
        packages=packages,
        nodes=nodes,
        workspace_member_ids=frozenset(pid(name) for name in members),
    )


def names(graph: DependencyGraph, package_ids: list[PackageId]) -> list[str]:
    """Map ordered ids back to package names."""
    return [graph.get_package(package_id).name for package_id in package_ids]
