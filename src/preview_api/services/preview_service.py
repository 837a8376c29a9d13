import asyncio
import logging
from typing import Dict

from preview_api.common.errors import (
    ExtractionError,
    FetchError,
    PreviewUnavailableError,
)
from preview_api.models.link_preview import LinkPreview
from preview_api.services.fetcher import Fetcher
from preview_api.services.metadata_extractor import MetadataExtractor
from preview_api.services.preview_store import PreviewStore

logger = logging.getLogger(__name__)


class PreviewService:
    """Serves cached previews, or fetches and extracts them on a miss.

    Concurrent requests that need a fetch for the same URL share a single
    fetch+extract+write task. Failures are never retried.
    """

    def __init__(
        self,
        store: PreviewStore,
        fetcher: Fetcher,
        extractor: MetadataExtractor,
    ):
        self.store = store
        self.fetcher = fetcher
        self.extractor = extractor
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def get_preview(self, url: str, force_refresh: bool = False) -> LinkPreview:
        if not force_refresh:
            cached = await self.store.get(url)
            if cached is not None:
                logger.info(f"Cache hit for {url}")
                return cached

        task = self._in_flight.get(url)
        if task is None:
            logger.info(
                f"{'Forced refresh' if force_refresh else 'Cache miss'} for {url}"
            )
            task = asyncio.create_task(self._fetch_and_store(url))
            self._in_flight[url] = task
            task.add_done_callback(lambda done: self._forget(url, done))
        else:
            logger.info(f"Joining in-flight fetch for {url}")

        try:
            # A waiter going away must not cancel the shared fetch
            return await asyncio.shield(task)
        except (FetchError, ExtractionError) as e:
            logger.error(f"Preview generation failed for {url}: {e}")
            raise PreviewUnavailableError() from e

    def _forget(self, url: str, task: asyncio.Task) -> None:
        if self._in_flight.get(url) is task:
            del self._in_flight[url]
        # Every waiter may already be gone; mark the failure as seen
        if not task.cancelled():
            task.exception()

    async def _fetch_and_store(self, url: str) -> LinkPreview:
        html = await self.fetcher.fetch(url)
        metadata = await self.extractor.extract(url, html)

        existing = await self.store.get(url)
        if existing is not None:
            updated = await self.store.update(existing.id, metadata)
            if updated is not None:
                return updated
        return await self.store.create(url, metadata)
