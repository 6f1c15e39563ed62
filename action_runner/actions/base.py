"""Base types for template actions."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TextIO, Type, Union

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]
JsonObject = Dict[str, JsonValue]


@dataclass
class ExecutionState:
    """Mutable state owned by a single action execution."""

    outputs: Dict[str, JsonValue] = field(default_factory=dict)
    temporary_directories: List[str] = field(default_factory=list)


@dataclass
class ActionContext:
    """Context passed to action handlers.

    ``output`` and ``create_temporary_directory`` write straight into the
    execution state the executor reads the result from.
    """

    input: JsonObject
    workspace_path: str
    logger: Any
    log_stream: TextIO
    _state: ExecutionState = field(repr=False)
    _temporary_directory_factory: Callable[[str, List[str]], Awaitable[str]] = field(
        repr=False
    )

    def output(self, name: str, value: JsonValue) -> None:
        """Record a named output value for this execution."""
        self._state.outputs[name] = value

    async def create_temporary_directory(self) -> str:
        """Create a new directory inside the workspace and return its path."""
        return await self._temporary_directory_factory(
            self.workspace_path, self._state.temporary_directories
        )


ActionHandler = Callable[[ActionContext], Awaitable[None]]


@dataclass(frozen=True)
class TemplateAction:
    """A named, registered unit of work."""

    id: str
    handler: ActionHandler
    description: str = ""
    version: Optional[str] = None
    input_schema: Optional[Type[BaseModel]] = None
    output_schema: Optional[Type[BaseModel]] = None

    def describe(self) -> Dict[str, Any]:
        """Return a JSON-serialisable description of the action."""
        schema: Dict[str, Any] = {}
        if self.input_schema is not None:
            schema["input"] = self.input_schema.model_json_schema()
        if self.output_schema is not None:
            schema["output"] = self.output_schema.model_json_schema()

        return {
            "id": self.id,
            "description": self.description,
            "version": self.version,
            "schema": schema,
        }


def create_template_action(
    id: str,
    handler: ActionHandler,
    description: str = "",
    version: Optional[str] = None,
    input_schema: Optional[Type[BaseModel]] = None,
    output_schema: Optional[Type[BaseModel]] = None,
) -> TemplateAction:
    """Create a template action record.

    Args:
        id: Unique identifier of the action, e.g. ``fetch:plain:file``
        handler: Coroutine function receiving the action context
        description: Human-readable description
        version: Optional version of the action implementation
        input_schema: Optional pydantic model the input must satisfy
        output_schema: Optional pydantic model describing the outputs

    Returns:
        Immutable action record
    """
    if not id:
        raise ValueError("Template action ID must not be empty")

    logger.debug("Created template action", action=id, version=version)

    return TemplateAction(
        id=id,
        handler=handler,
        description=description,
        version=version,
        input_schema=input_schema,
        output_schema=output_schema,
    )
