import asyncio
import base64
import html
import io
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlparse

import cairosvg
from PIL import Image

from preview_api.common.errors import FetchError, NotFoundError
from preview_api.models.export_request import ExportFormat, ExportRequest
from preview_api.models.link_preview import LinkPreview
from preview_api.models.preview_style import PreviewLayout, PreviewStyle
from preview_api.services.fetcher import Fetcher
from preview_api.services.preview_store import PreviewStore
from preview_api.services.style_catalog import StyleCatalog

logger = logging.getLogger(__name__)

CANVAS_PADDING = 20
CANVAS_BACKGROUND = "#f9fafb"
PLACEHOLDER_BACKGROUND = "#f3f4f6"
PLACEHOLDER_GLYPH = "#9ca3af"
FONT_FAMILY = "-apple-system, BlinkMacSystemFont, Segoe UI, Roboto, sans-serif"
SIDE_IMAGE_WIDTH = 192
CONTENT_PADDING = 16
NO_TITLE = "No title available"

_LENGTH_RE = re.compile(r"^(\d+(?:\.\d+)?)(px|rem|em|%)$")


@dataclass
class CardAssets:
    """Embedded images as PNG data URIs; ``None`` renders a placeholder."""

    image: Optional[str] = None
    favicon: Optional[str] = None


def radius_to_px(border_radius: str, card_width: float, card_height: float) -> float:
    match = _LENGTH_RE.match(border_radius.strip())
    if not match:
        return 0.0
    value, unit = float(match.group(1)), match.group(2)
    if unit in ("rem", "em"):
        return value * 16
    if unit == "%":
        return min(card_width, card_height) * value / 100
    return value


def clean_host(url: str) -> str:
    host = urlparse(url).hostname or url
    return host[4:] if host.startswith("www.") else host


def wrap_text(text: str, font_size: float, max_width: float, max_lines: int) -> List[str]:
    """Greedy word wrap using an average glyph width; overflow gets an ellipsis."""
    max_chars = max(int(max_width / (font_size * 0.55)), 1)
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = word[:max_chars]
        if len(lines) == max_lines:
            break
    if current and len(lines) < max_lines:
        lines.append(current)

    if len(lines) == max_lines and " ".join(lines) != " ".join(text.split()):
        last = lines[-1]
        if len(last) >= max_chars:
            last = last[: max_chars - 1].rstrip()
        lines[-1] = last + "…"
    return lines


def _text_block(
    lines: List[str], x: float, y: float, font_size: float, color: str, extra: str = ""
) -> str:
    line_height = font_size * 1.35
    spans = "".join(
        f'<tspan x="{x}" y="{y + font_size + i * line_height:.1f}">{html.escape(line)}</tspan>'
        for i, line in enumerate(lines)
    )
    return (
        f'<text font-family="{FONT_FAMILY}" font-size="{font_size}" '
        f'fill="{color}" {extra}>{spans}</text>'
    )


def _image_or_placeholder(
    data_uri: Optional[str], x: float, y: float, width: float, height: float
) -> str:
    if data_uri:
        return (
            f'<image x="{x}" y="{y}" width="{width}" height="{height}" '
            f'preserveAspectRatio="xMidYMid slice" xlink:href="{data_uri}" />'
        )
    r = min(width, height) / 8
    cx, cy = x + width / 2, y + height / 2
    return (
        f'<rect x="{x}" y="{y}" width="{width}" height="{height}" '
        f'fill="{PLACEHOLDER_BACKGROUND}" />'
        f'<circle cx="{cx}" cy="{cy}" r="{r:.1f}" fill="none" '
        f'stroke="{PLACEHOLDER_GLYPH}" stroke-width="2" />'
    )


def _text_column(
    preview: LinkPreview,
    style: PreviewStyle,
    assets: CardAssets,
    x: float,
    y: float,
    width: float,
    height: float,
) -> str:
    parts = []
    cursor = y + CONTENT_PADDING
    text_x = x + CONTENT_PADDING
    text_width = width - 2 * CONTENT_PADDING

    host_x = text_x
    if style.show_favicon:
        if assets.favicon:
            parts.append(
                f'<image x="{text_x}" y="{cursor}" width="16" height="16" '
                f'xlink:href="{assets.favicon}" />'
            )
        else:
            parts.append(
                f'<circle cx="{text_x + 8}" cy="{cursor + 8}" r="7" fill="none" '
                f'stroke="{style.accent_color}" stroke-width="1.5" />'
            )
        host_x = text_x + 24
    parts.append(
        _text_block(
            [clean_host(preview.url)],
            host_x,
            cursor,
            12,
            style.text_color,
            'opacity="0.6"',
        )
    )
    cursor += 16 + 12

    title_lines = wrap_text(preview.title or NO_TITLE, 18, text_width, 2)
    parts.append(
        _text_block(title_lines, text_x, cursor, 18, style.text_color, 'font-weight="600"')
    )
    cursor += len(title_lines) * 18 * 1.35 + 8

    remaining = y + height - CONTENT_PADDING - cursor
    max_description_lines = min(3, int(remaining // (14 * 1.35)))
    if preview.description and max_description_lines > 0:
        parts.append(
            _text_block(
                wrap_text(preview.description, 14, text_width, max_description_lines),
                text_x,
                cursor,
                14,
                style.text_color,
                'opacity="0.75"',
            )
        )
    return "".join(parts)


def render_card_svg(
    preview: LinkPreview,
    style: PreviewStyle,
    width: int,
    height: int,
    assets: Optional[CardAssets] = None,
) -> str:
    assets = assets or CardAssets()
    card_x = card_y = CANVAS_PADDING
    card_w = width - 2 * CANVAS_PADDING
    card_h = height - 2 * CANVAS_PADDING
    radius = radius_to_px(style.border_radius, card_w, card_h)

    body = []
    if style.layout == PreviewLayout.VERTICAL:
        text_y = card_y
        if style.show_image:
            banner_h = min(card_w / 2, card_h * 0.55)
            body.append(_image_or_placeholder(assets.image, card_x, card_y, card_w, banner_h))
            text_y = card_y + banner_h
        body.append(
            _text_column(preview, style, assets, card_x, text_y, card_w, card_y + card_h - text_y)
        )
    elif style.layout == PreviewLayout.HORIZONTAL and style.show_image:
        side_w = min(SIDE_IMAGE_WIDTH, card_w / 2)
        body.append(_image_or_placeholder(assets.image, card_x, card_y, side_w, card_h))
        body.append(
            _text_column(preview, style, assets, card_x + side_w, card_y, card_w - side_w, card_h)
        )
    else:
        body.append(_text_column(preview, style, assets, card_x, card_y, card_w, card_h))

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'xmlns:xlink="http://www.w3.org/1999/xlink" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
        f'<defs><clipPath id="card"><rect x="{card_x}" y="{card_y}" '
        f'width="{card_w}" height="{card_h}" rx="{radius}" /></clipPath></defs>'
        f'<rect width="{width}" height="{height}" fill="{CANVAS_BACKGROUND}" />'
        f'<rect x="{card_x}" y="{card_y}" width="{card_w}" height="{card_h}" '
        f'rx="{radius}" fill="{style.background_color}" />'
        f'<g clip-path="url(#card)">{"".join(body)}</g>'
        f'<rect x="{card_x + 0.5}" y="{card_y + 0.5}" width="{card_w - 1}" '
        f'height="{card_h - 1}" rx="{radius}" fill="none" '
        f'stroke="{style.border_color}" stroke-width="1" />'
        f"</svg>"
    )


def _to_png_data_uri(content: bytes) -> Optional[str]:
    try:
        img = Image.open(io.BytesIO(content))
        img.load()
        buffer = io.BytesIO()
        img.convert("RGBA").save(buffer, format="PNG")
    except Exception as e:
        logger.warning(f"Could not decode card asset: {e}")
        return None
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


def _rasterize_sync(
    svg: str, width: int, height: int, export_format: ExportFormat, quality: float
) -> bytes:
    png_bytes = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"), output_width=width, output_height=height
    )
    if export_format == ExportFormat.PNG:
        return png_bytes

    img = Image.open(io.BytesIO(png_bytes))
    buffer = io.BytesIO()
    pil_quality = int(round(quality * 100))
    if export_format == ExportFormat.JPEG:
        img.convert("RGB").save(buffer, format="JPEG", quality=pil_quality)
    else:
        img.save(buffer, format="WEBP", quality=pil_quality)
    return buffer.getvalue()


class ExportService:
    def __init__(self, store: PreviewStore, catalog: StyleCatalog, fetcher: Fetcher):
        self.store = store
        self.catalog = catalog
        self.fetcher = fetcher

    async def _load_asset(self, url: Optional[str]) -> Optional[str]:
        if not url:
            return None
        try:
            content = await self.fetcher.fetch_bytes(url)
        except FetchError as e:
            logger.warning(f"Card asset unavailable, using placeholder: {e}")
            return None
        return _to_png_data_uri(content)

    async def export(self, request: ExportRequest) -> bytes:
        preview = await self.store.get_by_id(request.preview_id)
        if preview is None:
            raise NotFoundError("Preview not found")
        style = await self.catalog.get(request.style_id)
        if style is None:
            raise NotFoundError("Style not found")

        start_time = time.time()
        image_uri, favicon_uri = await asyncio.gather(
            self._load_asset(preview.image if style.show_image else None),
            self._load_asset(preview.favicon if style.show_favicon else None),
        )
        svg = render_card_svg(
            preview,
            style,
            request.width,
            request.height,
            CardAssets(image=image_uri, favicon=favicon_uri),
        )

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor() as executor:
            content = await loop.run_in_executor(
                executor,
                _rasterize_sync,
                svg,
                request.width,
                request.height,
                request.format,
                request.quality,
            )

        logger.info(
            f"Exported preview {preview.id} as {request.format.value} "
            f"{request.width}x{request.height} in {time.time() - start_time:.4f} seconds"
        )
        return content
