"""Cargo metadata loading."""

from .loader import LoadedProject, MetadataLoader, build_graph, collect_dev_dependency_names
from .models import CargoMetadata

__all__ = [
    "CargoMetadata",
    "LoadedProject",
    "MetadataLoader",
    "build_graph",
    "collect_dev_dependency_names",
]
