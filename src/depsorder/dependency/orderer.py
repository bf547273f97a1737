"""Dependency Orderer - leaf-first ordering of a resolved dependency graph.

ALGORITHM (depth-first post-order):
1. Scope = workspace members (workspace_only) or every known package
2. Roots = packages in scope whose name is not a dev-dependency, taken in
   package list order
3. One visited set and one output list shared by every root, so a package
   reached from several roots is emitted once and the output is a single
   leaf-first sequence
4. Visit: skip visited ids, skip out-of-scope ids (without marking them),
   otherwise mark visited, visit every dependency edge that has a node in
   edge order, then emit the id

Example:
    A → B → C, A → D

    Visit A: mark A, visit B: mark B, visit C: emit C, emit B,
             visit D: emit D, emit A
    Output: [C, B, D, A]

Dev-dependency exclusion only applies to root selection. A dev-dependency
that is also reached through an included root is still emitted, before the
package that depends on it.

The traversal uses an explicit stack of (node, edge iterator) frames instead
of recursion, so deep graphs do not hit the interpreter recursion limit.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

import structlog

from .graph import DependencyGraph, GraphNode, PackageId

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderedDependency:
    """
    A dependency in execution order.

    Attributes:
        name: Package name
        version: Package version
        path: Directory containing the package manifest
    """

    name: str
    version: str
    path: Path


def _scope(graph: DependencyGraph, workspace_only: bool) -> frozenset[PackageId]:
    if workspace_only:
        return graph.workspace_member_ids
    return frozenset(graph.all_package_ids)


def _visit(
    root: GraphNode,
    graph: DependencyGraph,
    scope: frozenset[PackageId],
    visited: set[PackageId],
    output: list[PackageId],
) -> None:
    """Post-order walk from ``root``, appending newly finished ids to ``output``."""
    if root.id in visited or root.id not in scope:
        return

    visited.add(root.id)
    stack: list[tuple[GraphNode, Iterator[PackageId]]] = [(root, iter(root.dependencies))]

    while stack:
        node, edges = stack[-1]
        for dep_id in edges:
            dep_node = graph.get_node(dep_id)
            if dep_node is None or dep_id in visited or dep_id not in scope:
                continue
            visited.add(dep_id)
            stack.append((dep_node, iter(dep_node.dependencies)))
            break
        else:
            # All dependencies finished
            stack.pop()
            output.append(node.id)


def order(
    graph: DependencyGraph,
    dev_dependency_names: Iterable[str],
    workspace_only: bool,
) -> list[PackageId]:
    """
    Compute the leaf-first order of package ids.

    Pure function: identical inputs give identical output. Ties are broken by
    package list order (roots) and edge order (dependencies).

    Args:
        graph: Resolved dependency graph
        dev_dependency_names: Names of packages used as dev-dependencies anywhere
        workspace_only: Restrict traversal and output to workspace members

    Returns:
        Package ids, every dependency before its dependents, each at most once
    """
    dev_names = frozenset(dev_dependency_names)
    scope = _scope(graph, workspace_only)

    visited: set[PackageId] = set()
    output: list[PackageId] = []

    for package in graph.packages:
        if package.id not in scope:
            continue

        if package.name in dev_names:
            logger.debug("Skipping dev-dependency as root", package=package.name)
            continue

        root = graph.get_node(package.id)
        if root is None:
            continue

        _visit(root, graph, scope, visited, output)

    logger.debug(
        "Dependency order computed",
        workspace_only=workspace_only,
        scope=len(scope),
        ordered=len(output),
    )

    return output


def resolve(
    graph: DependencyGraph,
    package_ids: Iterable[PackageId],
    workspace_only: bool,
) -> list[OrderedDependency]:
    """
    Map ordered package ids to dependency records.

    Ids without a package record, or outside the workspace when
    ``workspace_only`` is set, are dropped.

    Args:
        graph: Graph the ids came from
        package_ids: Ids in execution order
        workspace_only: Drop ids that are not workspace members

    Returns:
        Dependency records in the same order
    """
    dependencies: list[OrderedDependency] = []

    for package_id in package_ids:
        package = graph.get_package(package_id)
        if package is None:
            logger.debug("Dropping unresolved package id", package_id=str(package_id))
            continue
        if workspace_only and not graph.is_workspace_member(package_id):
            logger.debug("Dropping non-workspace package", package=package.name)
            continue

        dependencies.append(
            OrderedDependency(name=package.name, version=package.version, path=package.path)
        )

    return dependencies


def list_dependencies(
    graph: DependencyGraph,
    dev_dependency_names: Iterable[str],
    workspace_only: bool,
) -> list[OrderedDependency]:
    """Order the graph leaf-first and resolve the result to dependency records."""
    return resolve(graph, order(graph, dev_dependency_names, workspace_only), workspace_only)
