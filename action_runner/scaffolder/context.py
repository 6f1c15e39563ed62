"""Assembly of the context handed to action handlers."""

from typing import Any, TextIO

from ..actions.base import ActionContext, ExecutionState
from .models import ExecutionRequest
from .workspace import WorkspaceProvisioner


def build_action_context(
    request: ExecutionRequest,
    workspace_path: str,
    logger: Any,
    log_stream: TextIO,
    state: ExecutionState,
    provisioner: WorkspaceProvisioner,
) -> ActionContext:
    """Bundle the capabilities of one execution into an action context.

    The context keeps references to ``state``; outputs and temporary
    directories recorded by the handler land directly in it.
    """
    return ActionContext(
        input=request.input,
        workspace_path=workspace_path,
        logger=logger,
        log_stream=log_stream,
        _state=state,
        _temporary_directory_factory=provisioner.create_temporary_directory,
    )
