"""Key lookup over nested configuration."""

from typing import Any, Mapping, Optional

from .settings import RunnerSettings


_MISSING = object()


class ConfigReader:
    """Read-only view over nested configuration addressed by dotted keys.

    Keys use the camelCase names of the configuration file, e.g.
    ``backend.workingDirectory``. A key whose value is ``None`` is treated as
    absent.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, prefix: str = "") -> None:
        self._data: Mapping[str, Any] = data or {}
        self._prefix = prefix

    @classmethod
    def from_settings(cls, settings: RunnerSettings) -> "ConfigReader":
        """Build a reader from runner settings."""
        return cls(settings.model_dump(by_alias=True, exclude_none=True))

    def _lookup(self, key: str) -> Any:
        value: Any = self._data
        for part in key.split("."):
            if isinstance(value, Mapping) and part in value:
                value = value[part]
            else:
                return _MISSING
        return _MISSING if value is None else value

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}.{key}" if self._prefix else key

    def has(self, key: str) -> bool:
        """Check whether a value is present for ``key``."""
        return self._lookup(key) is not _MISSING

    def get(self, key: str) -> Any:
        """Return the raw value for ``key``.

        Raises:
            KeyError: If the key is missing
        """
        value = self._lookup(key)
        if value is _MISSING:
            raise KeyError(f"Missing required config value at '{self._full_key(key)}'")
        return value

    def get_string(self, key: str) -> str:
        """Return the string value for ``key``.

        Raises:
            KeyError: If the key is missing
            TypeError: If the value is not a string
        """
        value = self.get(key)
        if not isinstance(value, str):
            raise TypeError(
                f"Invalid type in config for key '{self._full_key(key)}', "
                f"got {type(value).__name__}, wanted string"
            )
        return value

    def get_optional_string(self, key: str) -> Optional[str]:
        """Return the string value for ``key`` or None when absent."""
        if not self.has(key):
            return None
        return self.get_string(key)

    def get_config(self, key: str) -> "ConfigReader":
        """Return a reader scoped to the mapping at ``key``."""
        value = self.get(key)
        if not isinstance(value, Mapping):
            raise TypeError(
                f"Invalid type in config for key '{self._full_key(key)}', "
                f"got {type(value).__name__}, wanted object"
            )
        return ConfigReader(value, prefix=self._full_key(key))
