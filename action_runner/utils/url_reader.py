"""URL reader used by actions that fetch remote content."""

from typing import Dict, Optional

import aiohttp
import structlog

from ..errors import UrlReadError


logger = structlog.get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class UrlReader:
    """Async byte fetcher backed by an aiohttp session."""

    def __init__(
        self,
        timeout: int = 30,
        max_bytes: int = 10 * 1024 * 1024,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """Initialize the URL reader.

        Args:
            timeout: Total request timeout in seconds
            max_bytes: Largest response body accepted
            headers: Extra headers sent with every request
        """
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.headers = {"User-Agent": "action-runner/0.1.0", **(headers or {})}
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout, headers=self.headers)
        return self._session

    async def read_url(self, url: str) -> bytes:
        """Read the content at ``url``.

        Args:
            url: HTTP(S) URL to read

        Returns:
            Response body

        Raises:
            UrlReadError: On HTTP errors, oversized bodies or transport failures
        """
        if not url.startswith(("http://", "https://")):
            raise UrlReadError(url, "only http and https URLs are supported")

        session = await self._get_session()

        logger.info("Reading URL", url=url)

        try:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise UrlReadError(url, f"HTTP {response.status}")

                if response.content_length and response.content_length > self.max_bytes:
                    raise UrlReadError(
                        url, f"content length {response.content_length} exceeds {self.max_bytes} bytes"
                    )

                chunks = []
                size = 0
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise UrlReadError(url, f"content exceeds {self.max_bytes} bytes")
                    chunks.append(chunk)
                body = b"".join(chunks)

        except aiohttp.ClientError as e:
            logger.error("HTTP error reading URL", url=url, error=str(e))
            raise UrlReadError(url, str(e)) from e

        logger.info("Read URL", url=url, size=len(body))
        return body

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
