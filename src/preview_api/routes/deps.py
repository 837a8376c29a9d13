from fastapi import Request

from preview_api.services.export_service import ExportService
from preview_api.services.preview_service import PreviewService
from preview_api.services.preview_store import PreviewStore
from preview_api.services.style_catalog import StyleCatalog


def get_preview_service(request: Request) -> PreviewService:
    return request.app.state.preview_service


def get_preview_store(request: Request) -> PreviewStore:
    return request.app.state.preview_store


def get_style_catalog(request: Request) -> StyleCatalog:
    return request.app.state.style_catalog


def get_export_service(request: Request) -> ExportService:
    return request.app.state.export_service
