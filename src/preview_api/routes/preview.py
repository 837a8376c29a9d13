from fastapi import APIRouter, Depends, Path
from typing_extensions import Annotated

from preview_api.common.errors import NotFoundError
from preview_api.models.link_preview import LinkPreview, LinkPreviewRequest
from preview_api.routes.deps import get_preview_service, get_preview_store
from preview_api.services.preview_service import PreviewService
from preview_api.services.preview_store import PreviewStore

router = APIRouter(
    prefix="/api/preview",
    tags=["preview"],
    responses={404: {"description": "Not found"}},
)


@router.post("", operation_id="create_preview", response_model=LinkPreview)
async def create_preview(
    request_body: LinkPreviewRequest,
    preview_service: Annotated[PreviewService, Depends(get_preview_service)],
):
    return await preview_service.get_preview(
        request_body.url, force_refresh=request_body.force_refresh
    )


@router.get("/{preview_id}", operation_id="get_preview", response_model=LinkPreview)
async def get_preview(
    preview_id: Annotated[int, Path()],
    store: Annotated[PreviewStore, Depends(get_preview_store)],
):
    preview = await store.get_by_id(preview_id)
    if preview is None:
        raise NotFoundError("Preview not found")
    return preview
