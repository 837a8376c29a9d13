from collections.abc import Awaitable, Callable

from fastapi.responses import JSONResponse
from fastapi_healthcheck.enum import HealthCheckStatusEnum

from preview_api.services.health_check.async_health_check_factory import (
    HealthCheckFactory,
)

STATUS_CODES = {
    HealthCheckStatusEnum.HEALTHY.value: 200,
    HealthCheckStatusEnum.UNHEALTHY.value: 503,
}


def create_health_check_route(
    factory: HealthCheckFactory,
) -> Callable[[], Awaitable[JSONResponse]]:
    """Build the ``/health`` endpoint: 200 when healthy, 503 otherwise."""

    async def endpoint() -> JSONResponse:
        result = await factory.check()
        return JSONResponse(
            content=result, status_code=STATUS_CODES.get(result["status"], 503)
        )

    return endpoint
