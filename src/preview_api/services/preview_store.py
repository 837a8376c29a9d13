import itertools
from datetime import datetime, timezone
from typing import Dict, Optional

from preview_api.models.link_preview import LinkPreview, PreviewMetadata


class PreviewStore:
    """In-process cache of previews keyed by the exact request URL.

    No eviction or TTL: entries live as long as the process. Methods are
    coroutines so a durable backend can take this one's place.
    """

    def __init__(self) -> None:
        self._previews: Dict[str, LinkPreview] = {}
        self._ids = itertools.count(1)

    async def get(self, url: str) -> Optional[LinkPreview]:
        return self._previews.get(url)

    async def get_by_id(self, preview_id: int) -> Optional[LinkPreview]:
        return next(
            (p for p in self._previews.values() if p.id == preview_id), None
        )

    async def create(self, url: str, metadata: PreviewMetadata) -> LinkPreview:
        preview = LinkPreview(
            id=next(self._ids),
            url=url,
            created_at=datetime.now(timezone.utc),
            **metadata.model_dump(),
        )
        self._previews[url] = preview
        return preview

    async def update(
        self, preview_id: int, metadata: PreviewMetadata
    ) -> Optional[LinkPreview]:
        existing = await self.get_by_id(preview_id)
        if existing is None:
            return None

        # id, url and created_at are never touched by a refresh
        updated = existing.model_copy(
            update=metadata.model_dump(exclude_unset=True)
        )
        self._previews[existing.url] = updated
        return updated

    async def count(self) -> int:
        return len(self._previews)
