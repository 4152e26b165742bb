"""HTTP(S) schema fetcher."""

import logging
from urllib.parse import urlsplit

import httpx

from crdforge.interfaces.fetcher import BaseSchemaFetcher, FetchedSchema, FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 12.0
DEFAULT_MAX_BYTES = 2 * 1024 * 1024
DEFAULT_USER_AGENT = "crdforge-crd-import/1.0"

_ACCEPT = "text/plain, application/yaml, application/x-yaml, */*"


def normalize_source_url(url: str) -> str:
    """Rewrite GitHub ``blob`` page URLs to their raw-content equivalent.

    ``https://github.com/<owner>/<repo>/blob/<ref>/<path>`` becomes
    ``https://raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>``.
    Any other URL is returned unchanged.
    """
    parts = urlsplit(url)
    if (parts.hostname or "").lower() != "github.com":
        return url

    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 5 or segments[2] != "blob":
        return url

    owner, repo, _, ref, *file_path = segments
    return f"https://raw.githubusercontent.com/{owner}/{repo}/{ref}/{'/'.join(file_path)}"


class HTTPSchemaFetcher(BaseSchemaFetcher):
    """Downloads CRD documents with httpx, enforcing a size cap."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_bytes: int = DEFAULT_MAX_BYTES,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds.
            max_bytes: Largest accepted body.
            user_agent: Value of the User-Agent header.
            transport: Optional httpx transport (used to stub the network).
        """
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self._transport = transport

    async def fetch(self, url: str) -> FetchedSchema:
        """Fetch a CRD document.

        Args:
            url: An http or https URL.

        Returns:
            FetchedSchema with the normalized URL and trimmed body.

        Raises:
            FetchError: On an invalid URL, a transport error, a non-2xx
                status, an oversized body or an empty body.
        """
        trimmed = url.strip()
        if not trimmed:
            raise FetchError("url is required")

        try:
            parts = urlsplit(trimmed)
        except ValueError as e:
            raise FetchError(f"invalid url: {e}") from e
        if parts.scheme not in ("http", "https"):
            raise FetchError("only http and https urls are supported")
        if not parts.hostname:
            raise FetchError("url hostname is required")

        source_url = normalize_source_url(trimmed)
        logger.info(f"Fetching CRD from {source_url}")

        headers = {"User-Agent": self.user_agent, "Accept": _ACCEPT}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport, follow_redirects=True
            ) as client:
                async with client.stream("GET", source_url, headers=headers) as response:
                    if not 200 <= response.status_code < 300:
                        raise FetchError(f"fetch failed with status {response.status_code}")
                    body = await self._read_capped(response)
        except httpx.HTTPError as e:
            logger.error(f"Fetch of {source_url} failed: {e}")
            raise FetchError(f"fetch url: {e}") from e

        contents = body.decode("utf-8", errors="replace").strip()
        if not contents:
            raise FetchError("document is empty")

        logger.info(f"Fetched {len(body)} bytes from {source_url}")
        return FetchedSchema(source_url=source_url, raw=contents)

    async def _read_capped(self, response: httpx.Response) -> bytes:
        body = bytearray()
        async for chunk in response.aiter_bytes():
            body.extend(chunk)
            if len(body) > self.max_bytes:
                raise FetchError(f"document is too large (max {self.max_bytes // (1024 * 1024)}MB)")
        return bytes(body)
