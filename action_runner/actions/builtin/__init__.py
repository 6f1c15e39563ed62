"""Built-in template actions."""

from typing import Any, List, Optional

import structlog

from ...utils.catalog import CatalogClient
from ...utils.url_reader import UrlReader
from ..base import TemplateAction
from .catalog import create_fetch_catalog_entity_action
from .debug import create_debug_log_action, create_wait_action
from .fetch import create_fetch_plain_file_action
from .filesystem import create_filesystem_delete_action, create_filesystem_rename_action


logger = structlog.get_logger(__name__)


def create_builtin_actions(
    catalog_client: Optional[CatalogClient] = None,
    reader: Optional[UrlReader] = None,
    config: Optional[Any] = None,
) -> List[TemplateAction]:
    """Create the built-in template actions.

    Actions that need a collaborator are only included when it is provided.

    Args:
        catalog_client: Catalog client for ``catalog:*`` actions
        reader: URL reader for ``fetch:*`` actions
        config: Configuration lookup

    Returns:
        Newly created action records
    """
    actions = [
        create_debug_log_action(),
        create_wait_action(),
        create_filesystem_delete_action(),
        create_filesystem_rename_action(),
    ]

    if reader is not None:
        actions.append(create_fetch_plain_file_action(reader))
    else:
        logger.warning("No URL reader configured, skipping fetch actions")

    if catalog_client is not None:
        actions.append(create_fetch_catalog_entity_action(catalog_client))
    else:
        logger.warning("No catalog client configured, skipping catalog actions")

    return actions


__all__ = ["create_builtin_actions"]
