import logging
from typing import Callable, List, Optional

from fastapi_healthcheck.enum import HealthCheckStatusEnum

from preview_api.services.health_check.async_health_check_interface import (
    HealthCheckProtocol,
)
from preview_api.services.preview_store import PreviewStore

logger = logging.getLogger(__name__)


class PreviewStoreHealthCheck(HealthCheckProtocol):
    """Healthy once the lifespan has built the store and it answers ``count``."""

    def __init__(
        self,
        alias: str,
        get_store: Callable[[], Optional[PreviewStore]],
        tags: Optional[List[str]] = None,
    ) -> None:
        self.alias = alias
        self.tags = tags or []
        self._get_store = get_store

    async def check_health(self) -> HealthCheckStatusEnum:
        store = self._get_store()
        if store is None:
            return HealthCheckStatusEnum.UNHEALTHY
        try:
            await store.count()
        except Exception as e:
            logger.error(f"Preview store health check failed: {e}")
            return HealthCheckStatusEnum.UNHEALTHY
        return HealthCheckStatusEnum.HEALTHY
