"""Catalog REST client used by catalog actions."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp
import structlog

from ..errors import CatalogError


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EntityRef:
    """Parsed ``kind:namespace/name`` entity reference."""

    kind: str
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.namespace}/{self.name}".lower()


def parse_entity_ref(
    ref: str,
    default_kind: Optional[str] = None,
    default_namespace: str = "default",
) -> EntityRef:
    """Parse an entity reference string.

    Accepts ``kind:namespace/name``, ``kind:name``, ``namespace/name`` and
    ``name``; missing parts come from the defaults.

    Raises:
        ValueError: If the reference is malformed or has no kind
    """
    if not ref or not ref.strip():
        raise ValueError("Entity reference must not be empty")

    kind: Optional[str] = default_kind
    rest = ref.strip()
    if ":" in rest:
        kind, rest = rest.split(":", 1)

    namespace = default_namespace
    if "/" in rest:
        namespace, rest = rest.split("/", 1)

    if not kind:
        raise ValueError(f"Entity reference '{ref}' had missing or empty kind")
    if not namespace or not rest or "/" in rest or ":" in rest:
        raise ValueError(f"Entity reference '{ref}' is malformed")

    return EntityRef(kind=kind, namespace=namespace, name=rest)


class CatalogClient:
    """Async client for the catalog entity API."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 10) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Base URL of the catalog API, e.g. ``http://host/api/catalog``
            token: Optional bearer token
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

        logger.info("Initialized catalog client", base_url=self.base_url)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=headers,
            )
        return self._session

    async def get_entity_by_ref(
        self, ref: str, default_kind: Optional[str] = None, default_namespace: str = "default"
    ) -> Optional[Dict[str, Any]]:
        """Fetch a single entity.

        Args:
            ref: Entity reference
            default_kind: Kind used when the reference has none
            default_namespace: Namespace used when the reference has none

        Returns:
            Entity document, or None if the catalog has no such entity

        Raises:
            CatalogError: On unexpected responses or transport failures
        """
        entity_ref = parse_entity_ref(ref, default_kind, default_namespace)
        url = (
            f"{self.base_url}/entities/by-name/"
            f"{quote(entity_ref.kind, safe='')}/"
            f"{quote(entity_ref.namespace, safe='')}/"
            f"{quote(entity_ref.name, safe='')}"
        )

        session = await self._get_session()

        try:
            async with session.get(url) as response:
                if response.status == 404:
                    logger.debug("Entity not found", entity=str(entity_ref))
                    return None
                if response.status >= 400:
                    text = await response.text()
                    raise CatalogError(
                        f"Request failed with {response.status}: {text[:200]}"
                    )
                entity: Dict[str, Any] = await response.json()

        except aiohttp.ClientError as e:
            logger.error("HTTP error fetching entity", entity=str(entity_ref), error=str(e))
            raise CatalogError(str(e)) from e

        logger.info("Fetched entity", entity=str(entity_ref))
        return entity

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
