"""Utility functions and helpers."""

from .catalog import CatalogClient, EntityRef, parse_entity_ref
from .logging import LogStream, setup_logging
from .paths import is_child_path, resolve_safe_child_path
from .url_reader import UrlReader

__all__ = [
    "CatalogClient",
    "EntityRef",
    "LogStream",
    "UrlReader",
    "is_child_path",
    "parse_entity_ref",
    "resolve_safe_child_path",
    "setup_logging",
]
