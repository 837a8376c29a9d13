from fastapi import FastAPI

from preview_api.services.health_check.async_health_check_factory import HealthCheckFactory
from preview_api.services.health_check.async_health_check_route import (
    create_health_check_route,
)
from preview_api.services.health_check.preview_store_health_check import (
    PreviewStoreHealthCheck,
)


def setup_health_checks(app: FastAPI) -> None:
    health_checks = HealthCheckFactory()
    health_checks.add(
        PreviewStoreHealthCheck(
            alias="preview_store",
            get_store=lambda: getattr(app.state, "preview_store", None),
            tags=["cache", "storage"],
        )
    )
    app.add_api_route(
        "/health",
        endpoint=create_health_check_route(factory=health_checks),
        tags=["system"],
    )
