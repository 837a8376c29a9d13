import itertools
from datetime import datetime, timezone
from typing import Dict, List, Optional

from preview_api.models.preview_style import (
    PreviewLayout,
    PreviewStyle,
    PreviewStyleCreate,
)

DEFAULT_STYLES: List[PreviewStyleCreate] = [
    PreviewStyleCreate(
        name="Default",
        border_radius="12px",
        border_color="#e5e7eb",
        background_color="#ffffff",
        text_color="#111827",
        accent_color="#3b82f6",
        show_image=True,
        show_favicon=True,
        layout=PreviewLayout.HORIZONTAL,
    ),
    PreviewStyleCreate(
        name="Dark",
        border_radius="8px",
        border_color="#374151",
        background_color="#1f2937",
        text_color="#f9fafb",
        accent_color="#60a5fa",
        show_image=True,
        show_favicon=True,
        layout=PreviewLayout.HORIZONTAL,
    ),
    PreviewStyleCreate(
        name="Minimal",
        border_radius="4px",
        border_color="#d1d5db",
        background_color="#ffffff",
        text_color="#374151",
        accent_color="#6b7280",
        show_image=False,
        show_favicon=True,
        layout=PreviewLayout.COMPACT,
    ),
    PreviewStyleCreate(
        name="Card",
        border_radius="16px",
        border_color="#e5e7eb",
        background_color="#f9fafb",
        text_color="#111827",
        accent_color="#10b981",
        show_image=True,
        show_favicon=True,
        layout=PreviewLayout.VERTICAL,
    ),
]

DEFAULT_STYLE_ID = 1


class StyleCatalog:
    def __init__(self) -> None:
        self._styles: Dict[int, PreviewStyle] = {}
        self._ids = itertools.count(1)
        for style in DEFAULT_STYLES:
            self._add(style)

    def _add(self, payload: PreviewStyleCreate) -> PreviewStyle:
        style = PreviewStyle(
            id=next(self._ids),
            created_at=datetime.now(timezone.utc),
            **payload.model_dump(),
        )
        self._styles[style.id] = style
        return style

    async def list(self) -> List[PreviewStyle]:
        return sorted(self._styles.values(), key=lambda s: s.id)

    async def get(self, style_id: int) -> Optional[PreviewStyle]:
        return self._styles.get(style_id)

    async def create(self, payload: PreviewStyleCreate) -> PreviewStyle:
        return self._add(payload)
