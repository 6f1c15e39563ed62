"""Single action execution: workspace provisioning, context and executor."""

from .context import build_action_context
from .executor import ActionExecutor
from .models import ExecutionRequest, ExecutionResult
from .workspace import WorkspaceProvisioner

__all__ = [
    "ActionExecutor",
    "ExecutionRequest",
    "ExecutionResult",
    "WorkspaceProvisioner",
    "build_action_context",
]
