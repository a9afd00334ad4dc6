from __future__ import annotations

import httpx

from doctext_service.settings import Settings
from doctext_service.utils.errors import UpstreamFetchError
from doctext_service.utils.utils import setup_logging


class DocumentFetcher:
    """Downloads a remote document with a single GET, no retries."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.log = setup_logging(component_name="fetcher", log_level=settings.LOG_LEVEL)
        self.transport = transport

    async def fetch(self, url: str) -> bytes:
        """ Fetches the raw bytes behind `url`.

        Args:
            url (str): absolute http(s) URL of the document.

        Raises:
            UpstreamFetchError: the remote server answered with a non-2xx status.
            httpx.HTTPError: the request itself failed (bad URL, DNS, connection, timeout).

        Returns:
            bytes: the response body.
        """
        async with httpx.AsyncClient(transport=self.transport, follow_redirects=True) as client:
            response = await client.get(url)

        if not response.is_success:
            self.log.warning("fetch of %s returned HTTP %s", url, response.status_code)
            raise UpstreamFetchError(response.status_code, url=url)

        self.log.info("fetched %s (%d bytes)", url, len(response.content))
        return response.content
