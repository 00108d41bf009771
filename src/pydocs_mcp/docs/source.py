"""HTTP access to the DevDocs documentation mirror."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger("pydocs-mcp.source")


class DocFetchError(Exception):
    """Raised when an index or page cannot be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetch failed: {url} -> {reason}")
        self.url = url
        self.reason = reason


class DocSource:
    """Fetches raw index JSON and page HTML from DevDocs.

    URLs follow ``<base>/<product>~<version>/index.json`` and
    ``<base>/<product>~<version>/<path>.html``. Each request runs with its own
    client and is bounded by ``timeout_s``.
    """

    def __init__(
        self,
        base_url: str,
        product: str,
        timeout_s: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.product = product
        self.timeout_s = timeout_s
        self._transport = transport

    def index_url(self, version: str) -> str:
        return f"{self.base_url}/{self.product}~{version}/index.json"

    def doc_url(self, version: str, path: str) -> str:
        return f"{self.base_url}/{self.product}~{version}/{path}.html"

    async def fetch_text(self, url: str) -> str:
        """GET url and return the body text.

        Raises:
            DocFetchError: On timeout, transport failure or a non-2xx status.
        """
        logger.info("Fetching: %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                if not response.is_success:
                    raise DocFetchError(url, f"HTTP {response.status_code}")
                return response.text
        except httpx.TimeoutException as exc:
            error = DocFetchError(url, f"timed out after {self.timeout_s:g}s")
            logger.error("%s", error)
            raise error from exc
        except httpx.HTTPError as exc:
            error = DocFetchError(url, str(exc) or exc.__class__.__name__)
            logger.error("%s", error)
            raise error from exc
        except DocFetchError as exc:
            logger.error("%s", exc)
            raise

    async def fetch_doc_html(self, version: str, path: str) -> str:
        return await self.fetch_text(self.doc_url(version, path))
