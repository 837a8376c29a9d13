import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from preview_api.configurations.config import settings
from preview_api.services.export_service import ExportService
from preview_api.services.fetcher import get_fetcher
from preview_api.services.metadata_extractor import MetadataExtractor
from preview_api.services.preview_service import PreviewService
from preview_api.services.preview_store import PreviewStore
from preview_api.services.style_catalog import StyleCatalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(local_app: FastAPI):
    # Tests swap in an httpx.MockTransport before the app starts
    transport = getattr(local_app.state, "http_transport", None)

    async with get_fetcher(transport) as fetcher:
        store = PreviewStore()
        catalog = StyleCatalog()
        extractor = MetadataExtractor(
            fetcher, probe_favicon=settings.favicon_probe_enabled
        )

        local_app.state.preview_store = store
        local_app.state.style_catalog = catalog
        local_app.state.preview_service = PreviewService(store, fetcher, extractor)
        local_app.state.export_service = ExportService(store, catalog, fetcher)
        logger.info(f"{settings.app_name} started ({settings.env})")

        yield

        logger.info("Shutting down application")
        local_app.state.preview_store = None

    logger.info("Application shutdown complete")
