"""Unit tests for WorkspaceProvisioner."""

import os
import tempfile
from unittest.mock import MagicMock

import pytest

from action_runner.config import ConfigReader
from action_runner.errors import InvalidInstanceId, WorkingDirectoryUnavailable
from action_runner.scaffolder import WorkspaceProvisioner
from action_runner.scaffolder import workspace as workspace_module


@pytest.fixture
def provisioner():
    """Provide a WorkspaceProvisioner."""
    return WorkspaceProvisioner()


class TestResolveRootDirectory:
    """Test root working directory resolution."""

    async def test_defaults_to_system_temp_dir(self, provisioner):
        """Test fallback when no working directory is configured."""
        root = await provisioner.resolve_root_directory(ConfigReader({}))

        assert root == tempfile.gettempdir()

    async def test_configured_directory(self, provisioner, config, working_directory):
        """Test a configured, writable directory is used."""
        root = await provisioner.resolve_root_directory(config)

        assert root == str(working_directory)

    async def test_missing_directory(self, provisioner, tmp_path):
        """Test a configured directory that does not exist is fatal."""
        missing = tmp_path / "does-not-exist"
        config = ConfigReader({"backend": {"workingDirectory": str(missing)}})

        with pytest.raises(WorkingDirectoryUnavailable) as exc_info:
            await provisioner.resolve_root_directory(config)

        assert exc_info.value.reason == WorkingDirectoryUnavailable.MISSING
        assert exc_info.value.path == str(missing)
        assert "does not exist" in str(exc_info.value)
        assert not missing.exists()

    async def test_not_writable_directory(self, provisioner, tmp_path, monkeypatch):
        """Test a configured directory without write access is fatal."""
        monkeypatch.setattr(os, "access", lambda path, mode: False)
        config = ConfigReader({"backend": {"workingDirectory": str(tmp_path)}})

        with pytest.raises(WorkingDirectoryUnavailable) as exc_info:
            await provisioner.resolve_root_directory(config)

        assert exc_info.value.reason == WorkingDirectoryUnavailable.NOT_WRITABLE
        assert "is not writable" in str(exc_info.value)


class TestDeriveWorkspacePath:
    """Test workspace path derivation."""

    def test_instance_id_is_deterministic(self, provisioner):
        """Test the same instance ID yields the same path."""
        first = provisioner.derive_workspace_path("/work", "abc")
        second = provisioner.derive_workspace_path("/work", "abc")

        assert first == second == os.path.join("/work", "abc")

    def test_generated_paths_differ(self, provisioner):
        """Test omitting the instance ID yields fresh paths."""
        paths = {provisioner.derive_workspace_path("/work") for _ in range(50)}

        assert len(paths) == 50
        assert all(os.path.dirname(p) == "/work" for p in paths)

    @pytest.mark.parametrize("instance_id", ["", ".", "..", "a/b", "../escape", "x\0y"])
    def test_invalid_instance_ids(self, provisioner, instance_id):
        """Test instance IDs that are not a single path segment are rejected."""
        with pytest.raises(InvalidInstanceId):
            provisioner.derive_workspace_path("/work", instance_id)


class TestTemporaryDirectories:
    """Test scoped temporary directory creation."""

    async def test_create_workspace(self, provisioner, tmp_path):
        """Test workspace creation is idempotent."""
        workspace = str(tmp_path / "abc")

        await provisioner.create_workspace(workspace)
        await provisioner.create_workspace(workspace)

        assert os.path.isdir(workspace)

    async def test_creates_distinct_directories(self, provisioner, tmp_path):
        """Test each call creates a new directory inside the workspace."""
        workspace = str(tmp_path / "abc")
        tracked = []

        first = await provisioner.create_temporary_directory(workspace, tracked)
        second = await provisioner.create_temporary_directory(workspace, tracked)

        assert first != second
        assert tracked == [first, second]
        for path in (first, second):
            assert os.path.isdir(path)
            assert os.path.dirname(path) == workspace
            assert os.path.basename(path).startswith("step-0-")

    async def test_remove_temporary_directories(self, provisioner, tmp_path):
        """Test removal deletes directories and tolerates missing ones."""
        workspace = str(tmp_path / "abc")
        tracked = []
        path = await provisioner.create_temporary_directory(workspace, tracked)

        await provisioner.remove_temporary_directories(tracked + [str(tmp_path / "gone")])

        assert not os.path.exists(path)
        assert os.path.isdir(workspace)

    async def test_remove_logs_only_existing_directories(self, provisioner, tmp_path, monkeypatch):
        """Test removal is only reported for directories that were there."""
        mock_logger = MagicMock()
        monkeypatch.setattr(workspace_module, "logger", mock_logger)
        workspace = str(tmp_path / "abc")
        tracked = []
        path = await provisioner.create_temporary_directory(workspace, tracked)
        gone = str(tmp_path / "gone")

        await provisioner.remove_temporary_directories([path, gone])

        mock_logger.debug.assert_any_call("Removed temporary directory", path=path)
        mock_logger.debug.assert_any_call("Temporary directory already gone", path=gone)
        removed = [
            c for c in mock_logger.debug.call_args_list if c.args[0] == "Removed temporary directory"
        ]
        assert [c.kwargs["path"] for c in removed] == [path]
