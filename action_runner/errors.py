"""Exception hierarchy for action execution."""

from typing import Any


class ActionRunnerError(Exception):
    """Base class for all action runner errors."""


class ActionNotFound(ActionRunnerError):
    """No action is registered under the requested identifier."""

    def __init__(self, action_id: str) -> None:
        self.action_id = action_id
        super().__init__(f"Template action with ID '{action_id}' is not registered.")


class WorkingDirectoryUnavailable(ActionRunnerError):
    """The configured working directory cannot be used."""

    MISSING = "missing"
    NOT_WRITABLE = "not_writable"

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        detail = "does not exist" if reason == self.MISSING else "is not writable"
        super().__init__(f"working directory {path} {detail}")


class ActionInputInvalid(ActionRunnerError):
    """Input payload does not match the action's declared input schema."""

    def __init__(self, action_id: str, errors: list[dict[str, Any]]) -> None:
        self.action_id = action_id
        self.errors = errors
        super().__init__(
            f"Invalid input passed to action '{action_id}': {len(errors)} validation error(s)"
        )


class InvalidInstanceId(ActionRunnerError):
    """Instance identifier cannot be used as a workspace directory name."""

    def __init__(self, instance_id: str) -> None:
        self.instance_id = instance_id
        super().__init__(
            f"Instance ID '{instance_id}' must be a single path segment"
        )


class CatalogError(ActionRunnerError):
    """The catalog returned an unexpected response."""


class UrlReadError(ActionRunnerError):
    """Content could not be read from a URL."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"Unable to read {url}: {message}")
