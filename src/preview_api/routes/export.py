from fastapi import APIRouter, Depends
from fastapi.responses import Response
from typing_extensions import Annotated

from preview_api.models.export_request import ExportRequest
from preview_api.routes.deps import get_export_service
from preview_api.services.export_service import ExportService

router = APIRouter(
    prefix="/api/export",
    tags=["export"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "",
    operation_id="export_preview",
    response_class=Response,
    responses={200: {"content": {"image/png": {}, "image/jpeg": {}, "image/webp": {}}}},
)
async def export_preview(
    request_body: ExportRequest,
    export_service: Annotated[ExportService, Depends(get_export_service)],
):
    content = await export_service.export(request_body)
    filename = f"preview-{request_body.preview_id}.{request_body.format.value}"
    return Response(
        content=content,
        media_type=request_body.format.content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
