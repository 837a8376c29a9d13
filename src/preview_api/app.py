import logging
import time
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from preview_api.configurations.logging_config import setup_logging

setup_logging()

from preview_api.common.errors import PreviewApiError
from preview_api.configurations.config import settings
from preview_api.configurations.health_check_config import setup_health_checks
from preview_api.lifespan import lifespan
from preview_api.routes import export, preview, styles

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(preview.router)
app.include_router(styles.router)
app.include_router(export.router)

setup_health_checks(app)


def validation_message(exc: RequestValidationError) -> str:
    """First validation failure as a client-facing sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    # Messages raised by our own validators are passed through untouched
    ctx_error = (error.get("ctx") or {}).get("error")
    if error.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)
    field = next(
        (str(part) for part in reversed(error.get("loc", ())) if isinstance(part, str)),
        None,
    )
    if field and field != "body":
        return f"{field}: {error['msg']}"
    return error["msg"]


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse({"message": validation_message(exc)}, status_code=400)


@app.exception_handler(PreviewApiError)
async def preview_api_error_handler(
    request: Request, exc: PreviewApiError
) -> JSONResponse:
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


@app.middleware("http")
async def log_request_middleware(request: Request, call_next: Callable):
    paths_to_log = ["/api/preview", "/api/export"]

    if any(request.url.path.startswith(path) for path in paths_to_log):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - Response status: "
            f"{response.status_code} - Processed in {process_time:.4f} seconds"
        )

        return response
    else:
        return await call_next(request)
