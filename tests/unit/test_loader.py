"""Tests for the cargo metadata loader."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from src.depsorder.cargo.loader import (
    MetadataLoader,
    build_graph,
    collect_dev_dependency_names,
)
from src.depsorder.cargo.models import CargoMetadata
from src.depsorder.dependency.graph import PackageId
from src.depsorder.dependency.orderer import list_dependencies
from src.depsorder.utils.exceptions import GraphUnavailableError
from tests.helpers import APP_ID, CORE_ID, SERDE_ID, TEMPFILE_ID


class TestBuildGraph:
    def test_packages_nodes_and_members(self, cargo_metadata):
        graph = build_graph(CargoMetadata.model_validate(cargo_metadata))

        assert graph.all_package_ids == [
            PackageId(APP_ID),
            PackageId(CORE_ID),
            PackageId(SERDE_ID),
            PackageId(TEMPFILE_ID),
        ]
        assert graph.workspace_member_ids == {PackageId(APP_ID), PackageId(CORE_ID)}
        assert graph.get_node(PackageId(APP_ID)).dependencies == (
            PackageId(CORE_ID),
            PackageId(SERDE_ID),
        )
        assert graph.get_package(PackageId(CORE_ID)).path == Path("/ws/core")

    def test_missing_resolve_is_unavailable(self, cargo_metadata):
        cargo_metadata["resolve"] = None

        with pytest.raises(GraphUnavailableError, match="no resolve graph"):
            build_graph(CargoMetadata.model_validate(cargo_metadata))


class TestDevDependencyNames:
    def test_collects_dev_kind_only(self, cargo_metadata):
        names = collect_dev_dependency_names(CargoMetadata.model_validate(cargo_metadata))

        assert names == frozenset({"tempfile"})

    def test_collects_across_packages(self, cargo_metadata):
        cargo_metadata["packages"][0]["dependencies"].append(
            {"name": "criterion", "kind": "dev", "req": "^0.5"}
        )
        cargo_metadata["packages"][0]["dependencies"].append(
            {"name": "cc", "kind": "build", "req": "^1"}
        )

        names = collect_dev_dependency_names(CargoMetadata.model_validate(cargo_metadata))

        assert names == frozenset({"tempfile", "criterion"})


class TestMetadataLoader:
    """Test MetadataLoader with subprocess mocked."""

    def test_command_default(self):
        assert MetadataLoader().command() == ["cargo", "metadata", "--format-version", "1"]

    def test_command_with_manifest_path(self):
        loader = MetadataLoader(cargo="/opt/cargo", manifest_path=Path("ws/Cargo.toml"))

        assert loader.command() == [
            "/opt/cargo",
            "metadata",
            "--format-version",
            "1",
            "--manifest-path",
            "ws/Cargo.toml",
        ]

    @patch("src.depsorder.cargo.loader.subprocess.run")
    def test_load(self, mock_run, completed_metadata):
        mock_run.return_value = completed_metadata

        project = MetadataLoader(cwd=Path("/ws")).load()

        mock_run.assert_called_once_with(
            ["cargo", "metadata", "--format-version", "1"],
            cwd=Path("/ws"),
            capture_output=True,
            text=True,
            check=False,
        )
        assert len(project.graph.packages) == 4
        assert project.dev_dependency_names == frozenset({"tempfile"})

    @patch("src.depsorder.cargo.loader.subprocess.run")
    def test_cargo_not_found(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")

        with pytest.raises(GraphUnavailableError, match="could not run 'cargo'") as exc_info:
            MetadataLoader().load()

        assert isinstance(exc_info.value.original_error, FileNotFoundError)

    @patch("src.depsorder.cargo.loader.subprocess.run")
    def test_non_zero_exit(self, mock_run):
        mock_run.return_value = MagicMock(
            returncode=101,
            stdout="",
            stderr="error: could not find `Cargo.toml` in `/tmp` or any parent directory\n",
        )

        with pytest.raises(GraphUnavailableError) as exc_info:
            MetadataLoader().load()

        message = str(exc_info.value)
        assert "exit status 101" in message
        assert "could not find `Cargo.toml`" in message

    @patch("src.depsorder.cargo.loader.subprocess.run")
    def test_invalid_json(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="not json", stderr="")

        with pytest.raises(GraphUnavailableError, match="Failed to parse cargo metadata"):
            MetadataLoader().load()

    @patch("src.depsorder.cargo.loader.subprocess.run")
    def test_no_deps_output_is_unavailable(self, mock_run, cargo_metadata):
        cargo_metadata["resolve"] = None
        mock_run.return_value = MagicMock(
            returncode=0, stdout=json.dumps(cargo_metadata), stderr=""
        )

        with pytest.raises(GraphUnavailableError):
            MetadataLoader().load()


class TestLoadedProjectOrdering:
    """Ordering of the sample workspace."""

    @pytest.fixture
    def project(self, completed_metadata):
        with patch("src.depsorder.cargo.loader.subprocess.run", return_value=completed_metadata):
            return MetadataLoader().load()

    def test_all_packages(self, project):
        dependencies = list_dependencies(
            project.graph, project.dev_dependency_names, workspace_only=False
        )

        # tempfile is a dev-dependency, but core reaches it, so it stays in the order
        assert [dep.name for dep in dependencies] == ["serde", "tempfile", "core", "app"]

    def test_workspace_only(self, project):
        dependencies = list_dependencies(
            project.graph, project.dev_dependency_names, workspace_only=True
        )

        assert [dep.name for dep in dependencies] == ["core", "app"]
        assert dependencies[0].version == "0.1.0"
        assert dependencies[0].path == Path("/ws/core")
