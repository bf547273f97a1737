"""Pydantic models for ``cargo metadata --format-version 1`` output.

Only the fields the orderer needs are declared; everything else cargo emits
is accepted and ignored (extra="allow"), so newer cargo releases that add
fields keep working.

Usage:
    metadata = CargoMetadata.model_validate_json(stdout)
    for package in metadata.packages:
        ...
"""

from pydantic import BaseModel, Field


class DependencyDeclaration(BaseModel):
    """A dependency as declared in a package manifest.

    Attributes:
        name: Name of the depended-on package
        kind: None for normal dependencies, "dev" or "build" otherwise
    """

    name: str
    kind: str | None = Field(None, description="Dependency kind: null, 'dev' or 'build'")
    rename: str | None = None
    optional: bool = False

    model_config = {"extra": "allow"}

    @property
    def is_dev(self) -> bool:
        return self.kind == "dev"


class Package(BaseModel):
    """A package entry from the ``packages`` array."""

    id: str
    name: str
    version: str
    manifest_path: str
    source: str | None = None
    dependencies: list[DependencyDeclaration] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class NodeDep(BaseModel):
    """One resolved edge of a node (``resolve.nodes[].deps[]``)."""

    name: str
    pkg: str

    model_config = {"extra": "allow"}


class ResolveNode(BaseModel):
    """A node in the resolved dependency graph.

    ``deps`` carries the edges in resolver order. ``dependencies`` is the
    older flat id list, used when ``deps`` is absent.
    """

    id: str
    deps: list[NodeDep] | None = None
    dependencies: list[str] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    def edge_ids(self) -> list[str]:
        if self.deps is not None:
            return [dep.pkg for dep in self.deps]
        return list(self.dependencies)


class Resolve(BaseModel):
    """The ``resolve`` section of cargo metadata."""

    nodes: list[ResolveNode] = Field(default_factory=list)
    root: str | None = None

    model_config = {"extra": "allow"}


class CargoMetadata(BaseModel):
    """Top-level cargo metadata document.

    ``resolve`` is null when cargo is run with ``--no-deps``.
    """

    packages: list[Package]
    workspace_members: list[str] = Field(default_factory=list)
    resolve: Resolve | None = None
    workspace_root: str | None = None
    version: int = 1

    model_config = {"extra": "allow"}
