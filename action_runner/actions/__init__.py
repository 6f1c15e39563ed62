"""Template actions and their registry."""

from .base import (
    ActionContext,
    ActionHandler,
    ExecutionState,
    JsonObject,
    JsonValue,
    TemplateAction,
    create_template_action,
)
from .registry import ActionRegistry

__all__ = [
    "ActionContext",
    "ActionHandler",
    "ActionRegistry",
    "ExecutionState",
    "JsonObject",
    "JsonValue",
    "TemplateAction",
    "create_template_action",
]
