"""Open Graph / meta-tag extraction.

Each field is described by an ordered chain of ``(selector, attribute)``
sources. ``first_non_empty`` walks a chain and returns the first trimmed,
non-empty value; ``None`` as the attribute means the element's text.
"""
import logging
from typing import Optional, Sequence, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from preview_api.common.errors import ExtractionError
from preview_api.models.link_preview import PreviewMetadata
from preview_api.services.fetcher import Fetcher

logger = logging.getLogger(__name__)

Source = Tuple[str, Optional[str]]

TITLE_SOURCES: Sequence[Source] = (
    ('meta[property="og:title"]', "content"),
    ('meta[name="twitter:title"]', "content"),
    ("title", None),
)

DESCRIPTION_SOURCES: Sequence[Source] = (
    ('meta[property="og:description"]', "content"),
    ('meta[name="twitter:description"]', "content"),
    ('meta[name="description"]', "content"),
)

IMAGE_SOURCES: Sequence[Source] = (
    ('meta[property="og:image"]', "content"),
    ('meta[name="twitter:image"]', "content"),
)

SITE_NAME_SOURCES: Sequence[Source] = (('meta[property="og:site_name"]', "content"),)

FAVICON_SOURCES: Sequence[Source] = (
    ('link[rel="icon"]', "href"),
    ('link[rel="shortcut icon"]', "href"),
    ('link[rel="apple-touch-icon"]', "href"),
)

FAVICON_FALLBACK_PATH = "/favicon.ico"


def _source_value(soup: BeautifulSoup, selector: str, attribute: Optional[str]) -> str:
    tag = soup.select_one(selector)
    if tag is None:
        return ""
    if attribute is None:
        return tag.get_text().strip()
    value = tag.get(attribute)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def first_non_empty(soup: BeautifulSoup, sources: Sequence[Source]) -> str:
    for selector, attribute in sources:
        value = _source_value(soup, selector, attribute)
        if value:
            return value
    return ""


def resolve_url(base_url: str, value: str) -> str:
    """Make ``value`` absolute against ``base_url``; empty stays empty.

    An unparseable value (e.g. a broken IPv6 host) counts as absent.
    """
    if not value:
        return ""
    try:
        return urljoin(base_url, value)
    except ValueError:
        logger.info(f"Ignoring unparseable URL {value!r} on {base_url}")
        return ""


def parse_metadata(url: str, html: str) -> PreviewMetadata:
    """Pure parse step: no I/O, missing fields come back as empty strings."""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ExtractionError(url, str(e)) from e

    return PreviewMetadata(
        title=first_non_empty(soup, TITLE_SOURCES),
        description=first_non_empty(soup, DESCRIPTION_SOURCES),
        image=resolve_url(url, first_non_empty(soup, IMAGE_SOURCES)),
        favicon=resolve_url(url, first_non_empty(soup, FAVICON_SOURCES)),
        site_name=first_non_empty(soup, SITE_NAME_SOURCES),
    )


class MetadataExtractor:
    def __init__(self, fetcher: Fetcher, probe_favicon: bool = True):
        self.fetcher = fetcher
        self.probe_favicon = probe_favicon

    async def extract(self, url: str, html: str) -> PreviewMetadata:
        metadata = parse_metadata(url, html)

        if not metadata.favicon and self.probe_favicon:
            favicon_url = urljoin(url, FAVICON_FALLBACK_PATH)
            if await self.fetcher.head_exists(favicon_url):
                metadata = metadata.model_copy(update={"favicon": favicon_url})
            else:
                logger.info(f"No favicon found for {url}")

        return metadata
