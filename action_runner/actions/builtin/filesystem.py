"""Built-in actions for manipulating files in the workspace."""

import asyncio
import glob
import os
import shutil
from typing import List

from pydantic import BaseModel, Field

from ...utils.paths import resolve_safe_child_path
from ..base import ActionContext, TemplateAction, create_template_action


class FsDeleteInput(BaseModel):
    """Input of ``fs:delete``."""

    files: List[str] = Field(description="Workspace-relative files or glob patterns to delete")


class RenameEntry(BaseModel):
    """A single rename of ``fs:rename``."""

    from_: str = Field(alias="from")
    to: str
    overwrite: bool = False


class FsRenameInput(BaseModel):
    """Input of ``fs:rename``."""

    files: List[RenameEntry] = Field(description="Files to rename")


def _delete_matches(workspace_path: str, pattern: str) -> List[str]:
    resolve_safe_child_path(workspace_path, pattern)
    workspace = os.path.normpath(workspace_path)
    deleted = []
    for match in glob.glob(os.path.join(workspace_path, pattern), recursive=True):
        path = resolve_safe_child_path(workspace_path, os.path.relpath(match, workspace_path))
        # The workspace itself is never deleted, and children of an already
        # removed directory are gone by the time they come up.
        if path == workspace or not os.path.lexists(path):
            continue
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
        deleted.append(path)
    return deleted


def _rename(source: str, destination: str, overwrite: bool) -> None:
    if not os.path.exists(source):
        raise FileNotFoundError(f"File {source} does not exist")
    if os.path.exists(destination):
        if not overwrite:
            raise FileExistsError(f"There is already a file or directory at {destination}")
        if os.path.isdir(destination) and not os.path.islink(destination):
            shutil.rmtree(destination)
        else:
            os.remove(destination)
    os.makedirs(os.path.dirname(destination), exist_ok=True)
    shutil.move(source, destination)


def create_filesystem_delete_action() -> TemplateAction:
    """Create the ``fs:delete`` action."""

    async def handler(ctx: ActionContext) -> None:
        params = FsDeleteInput.model_validate(ctx.input)

        for pattern in params.files:
            deleted = await asyncio.to_thread(_delete_matches, ctx.workspace_path, pattern)
            ctx.logger.info("Deleted files", pattern=pattern, count=len(deleted))

    return create_template_action(
        id="fs:delete",
        handler=handler,
        description="Deletes files and directories from the workspace",
        input_schema=FsDeleteInput,
    )


def create_filesystem_rename_action() -> TemplateAction:
    """Create the ``fs:rename`` action."""

    async def handler(ctx: ActionContext) -> None:
        params = FsRenameInput.model_validate(ctx.input)

        for entry in params.files:
            source = resolve_safe_child_path(ctx.workspace_path, entry.from_)
            destination = resolve_safe_child_path(ctx.workspace_path, entry.to)

            await asyncio.to_thread(_rename, source, destination, entry.overwrite)
            ctx.logger.info("Renamed file", source=entry.from_, destination=entry.to)

    return create_template_action(
        id="fs:rename",
        handler=handler,
        description="Renames files and directories within the workspace",
        input_schema=FsRenameInput,
    )
