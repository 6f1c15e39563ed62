"""Working directory and workspace provisioning."""

import asyncio
import os
import shutil
import tempfile
import uuid
from typing import Iterable, List, Optional

import structlog

from ..config import ConfigReader
from ..errors import InvalidInstanceId, WorkingDirectoryUnavailable


logger = structlog.get_logger(__name__)

WORKING_DIRECTORY_KEY = "backend.workingDirectory"
TEMPORARY_DIRECTORY_PREFIX = "step-0-"


class WorkspaceProvisioner:
    """Resolves the root working directory and lays out per-execution workspaces.

    Every execution gets ``<root>/<instance id>``; without an instance ID a
    random hex token is used instead. Temporary directories are created inside
    the workspace and recorded in the execution's own list.
    """

    async def resolve_root_directory(self, config: ConfigReader) -> str:
        """Return the root directory all workspaces are created under.

        Args:
            config: Configuration lookup

        Returns:
            Configured working directory, or the system temp directory

        Raises:
            WorkingDirectoryUnavailable: If the configured directory is
                missing or not readable and writable
        """
        if not config.has(WORKING_DIRECTORY_KEY):
            return tempfile.gettempdir()

        working_directory = config.get_string(WORKING_DIRECTORY_KEY)

        reason = await asyncio.to_thread(self._check_directory, working_directory)
        if reason is not None:
            error = WorkingDirectoryUnavailable(working_directory, reason)
            logger.error(str(error), working_directory=working_directory, reason=reason)
            raise error

        logger.info("Using working directory", working_directory=working_directory)
        return working_directory

    @staticmethod
    def _check_directory(path: str) -> Optional[str]:
        if not os.path.isdir(path):
            return WorkingDirectoryUnavailable.MISSING
        if not os.access(path, os.R_OK | os.W_OK):
            return WorkingDirectoryUnavailable.NOT_WRITABLE
        return None

    def derive_workspace_path(self, root: str, instance_id: Optional[str] = None) -> str:
        """Derive the workspace path for one execution.

        The same ``instance_id`` always maps to the same path; omitting it
        yields a fresh path on every call.

        Raises:
            InvalidInstanceId: If ``instance_id`` is not a single path segment
        """
        if instance_id is None:
            return os.path.join(root, uuid.uuid4().hex)

        if (
            not instance_id
            or instance_id in (".", "..")
            or "/" in instance_id
            or (os.sep != "/" and os.sep in instance_id)
            or (os.altsep is not None and os.altsep in instance_id)
            or "\0" in instance_id
        ):
            raise InvalidInstanceId(instance_id)

        return os.path.join(root, instance_id)

    async def create_workspace(self, workspace_path: str) -> str:
        """Create the workspace directory if it does not exist yet."""
        await asyncio.to_thread(os.makedirs, workspace_path, exist_ok=True)
        logger.debug("Created workspace", workspace=workspace_path)
        return workspace_path

    async def create_temporary_directory(
        self, workspace_path: str, temporary_directories: List[str]
    ) -> str:
        """Create a uniquely named directory inside the workspace.

        Args:
            workspace_path: Workspace of the current execution
            temporary_directories: Per-execution list the new path is appended to

        Returns:
            Path of the new directory
        """
        await asyncio.to_thread(os.makedirs, workspace_path, exist_ok=True)
        tmp_dir = await asyncio.to_thread(
            tempfile.mkdtemp, prefix=TEMPORARY_DIRECTORY_PREFIX, dir=workspace_path
        )
        temporary_directories.append(tmp_dir)

        logger.debug("Created temporary directory", workspace=workspace_path, path=tmp_dir)
        return tmp_dir

    async def remove_temporary_directories(self, paths: Iterable[str]) -> None:
        """Remove temporary directories, ignoring ones that are already gone."""
        for path in paths:
            if not await asyncio.to_thread(os.path.isdir, path):
                logger.debug("Temporary directory already gone", path=path)
                continue
            await asyncio.to_thread(shutil.rmtree, path, ignore_errors=True)
            logger.debug("Removed temporary directory", path=path)
