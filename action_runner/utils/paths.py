"""Path helpers for workspace-relative file access."""

import os


def is_child_path(base: str, path: str) -> bool:
    """Check whether ``path`` is ``base`` or lies below it."""
    base_real = os.path.realpath(base)
    path_real = os.path.realpath(path)
    return os.path.commonpath([base_real, path_real]) == base_real


def resolve_safe_child_path(base: str, path: str) -> str:
    """Join ``path`` onto ``base`` and refuse results outside ``base``.

    Symlinks are resolved before the check.

    Raises:
        ValueError: If the resolved path escapes ``base``
    """
    target = os.path.join(base, path)
    if not is_child_path(base, target):
        raise ValueError(
            f"Relative path is not allowed to refer to a directory outside its parent: {path}"
        )
    return os.path.normpath(target)
