"""Request and result records for single action execution."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..actions.base import JsonObject, JsonValue


@dataclass
class ExecutionRequest:
    """Request to execute one template action."""

    action_id: str
    input: JsonObject = field(default_factory=dict)
    instance_id: Optional[str] = None


@dataclass
class ExecutionResult:
    """Outcome of a successful action execution."""

    action_id: str
    workspace_path: str
    outputs: Dict[str, JsonValue]
    temporary_directories: List[str]
