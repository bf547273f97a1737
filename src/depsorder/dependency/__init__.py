"""Dependency graph model and leaf-first ordering."""

from .graph import DependencyGraph, GraphNode, PackageId, PackageRecord
from .orderer import OrderedDependency, list_dependencies, order, resolve

__all__ = [
    "DependencyGraph",
    "GraphNode",
    "PackageId",
    "PackageRecord",
    "OrderedDependency",
    "list_dependencies",
    "order",
    "resolve",
]
