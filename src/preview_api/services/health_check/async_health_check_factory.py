from datetime import datetime
from typing import List

from fastapi_healthcheck.enum import HealthCheckStatusEnum
from fastapi_healthcheck.model import HealthCheckEntityModel, HealthCheckModel

from preview_api.services.health_check.async_health_check_interface import (
    HealthCheckProtocol,
)


def _status_value(status) -> str:
    return status.value if isinstance(status, HealthCheckStatusEnum) else status


class HealthCheckFactory:
    """Runs every registered check in order; one unhealthy entity fails all."""

    def __init__(self) -> None:
        self._health_checks: List[HealthCheckProtocol] = []

    def add(self, item: HealthCheckProtocol) -> None:
        self._health_checks.append(item)

    async def check(self) -> dict:
        health = HealthCheckModel()
        total_start = datetime.now()

        for item in self._health_checks:
            entity = HealthCheckEntityModel(alias=item.alias, tags=item.tags or [])

            entity_start = datetime.now()
            entity.status = await item.check_health()
            entity.timeTaken = datetime.now() - entity_start

            if entity.status == HealthCheckStatusEnum.UNHEALTHY:
                health.status = HealthCheckStatusEnum.UNHEALTHY
            health.entities.append(entity)

        health.totalTimeTaken = datetime.now() - total_start

        return {
            "status": _status_value(health.status),
            "totalTimeTaken": str(health.totalTimeTaken),
            "entities": [
                {
                    "alias": entity.alias,
                    "status": _status_value(entity.status),
                    "timeTaken": str(entity.timeTaken),
                    "tags": entity.tags,
                }
                for entity in health.entities
            ],
        }
