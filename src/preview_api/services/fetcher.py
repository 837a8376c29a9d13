import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from preview_api.common.errors import FetchError
from preview_api.configurations.config import settings

logger = logging.getLogger(__name__)


class Fetcher:
    """Outbound HTTP for page fetching, favicon probing and export assets.

    Every failure of ``fetch``/``fetch_bytes`` surfaces as ``FetchError``;
    ``head_exists`` never raises.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: Optional[float] = None,
        probe_timeout: Optional[float] = None,
    ):
        self.client = client
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self.probe_timeout = (
            probe_timeout
            if probe_timeout is not None
            else settings.favicon_probe_timeout
        )

    def _handle_response(self, url: str, response: httpx.Response) -> httpx.Response:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error {e.response.status_code} fetching {url}")
            raise FetchError(url, f"status {e.response.status_code}") from e
        return response

    async def _get(self, url: str) -> httpx.Response:
        try:
            response = await self.client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.warning(f"Timed out after {self.timeout}s fetching {url}")
            raise FetchError(url, "timeout") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Transport error fetching {url}: {e!r}")
            raise FetchError(url, str(e) or type(e).__name__) from e
        return self._handle_response(url, response)

    async def fetch(self, url: str) -> str:
        logger.info(f"Fetching {url}")
        response = await self._get(url)
        return response.text

    async def fetch_bytes(self, url: str) -> bytes:
        response = await self._get(url)
        return response.content

    async def head_exists(self, url: str) -> bool:
        try:
            response = await self.client.head(url, timeout=self.probe_timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"HEAD {url} failed: {e!r}")
            return False
        return response.is_success


def create_http_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=transport,
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(max_connections=settings.max_connections),
        timeout=settings.fetch_timeout,
    )


@asynccontextmanager
async def get_fetcher(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[Fetcher]:
    async with create_http_client(transport) as client:
        yield Fetcher(client)
