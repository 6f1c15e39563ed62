"""Template action registry."""

from typing import Any, Dict, Iterable, List

import structlog

from ..errors import ActionNotFound
from .base import TemplateAction


logger = structlog.get_logger(__name__)


class ActionRegistry:
    """Registry of template actions keyed by action ID.

    Registering the same action object twice is a no-op, so a full bulk load
    can be repeated safely. Registering a different action under an ID that is
    already taken replaces the previous action and logs a warning.

    The registry does no locking of its own; callers that populate it from
    concurrent tasks must serialise the load themselves.
    """

    def __init__(self) -> None:
        """Initialize an empty action registry."""
        self._actions: Dict[str, TemplateAction] = {}

        logger.debug("Initialized ActionRegistry")

    def register(self, action: TemplateAction) -> None:
        """Register a template action.

        Args:
            action: Action record to register
        """
        existing = self._actions.get(action.id)
        if existing is action:
            return

        if existing is not None:
            logger.warning(
                "Overriding existing template action",
                action=action.id,
                previous_version=existing.version,
                version=action.version,
            )

        self._actions[action.id] = action

        logger.debug(
            "Registered template action",
            action=action.id,
            version=action.version,
        )

    def register_all(self, actions: Iterable[TemplateAction]) -> None:
        """Register every action in ``actions``."""
        for action in actions:
            self.register(action)

    def get(self, action_id: str) -> TemplateAction:
        """Get the action registered under ``action_id``.

        Raises:
            ActionNotFound: If no action is registered under the ID
        """
        action = self._actions.get(action_id)
        if action is None:
            raise ActionNotFound(action_id)
        return action

    def has(self, action_id: str) -> bool:
        """Check whether an action is registered under ``action_id``."""
        return action_id in self._actions

    def list(self) -> List[TemplateAction]:
        """List registered actions in registration order."""
        return list(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "registered_actions": len(self._actions),
            "action_ids": list(self._actions.keys())
        }
