"""Shared fixtures for tests."""
import httpx
import pytest
import pytest_asyncio

from preview_api.services.fetcher import Fetcher
from preview_api.services.metadata_extractor import MetadataExtractor
from preview_api.services.preview_service import PreviewService
from preview_api.services.preview_store import PreviewStore
from helpers import FakeSite


@pytest.fixture
def site():
    return FakeSite()


@pytest_asyncio.fixture
async def http_client(site):
    async with httpx.AsyncClient(transport=site.transport, follow_redirects=True) as client:
        yield client


@pytest.fixture
def fetcher(http_client):
    return Fetcher(http_client, timeout=1.0, probe_timeout=1.0)


@pytest.fixture
def store():
    return PreviewStore()


@pytest.fixture
def preview_service(store, fetcher):
    return PreviewService(store, fetcher, MetadataExtractor(fetcher))
