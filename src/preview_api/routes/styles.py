from typing import List

from fastapi import APIRouter, Depends, Path, status
from typing_extensions import Annotated

from preview_api.common.errors import NotFoundError
from preview_api.models.preview_style import PreviewStyle, PreviewStyleCreate
from preview_api.routes.deps import get_style_catalog
from preview_api.services.style_catalog import StyleCatalog

router = APIRouter(
    prefix="/api/styles",
    tags=["styles"],
    responses={404: {"description": "Not found"}},
)


@router.get("", operation_id="list_styles", response_model=List[PreviewStyle])
async def list_styles(
    catalog: Annotated[StyleCatalog, Depends(get_style_catalog)],
):
    return await catalog.list()


@router.get("/{style_id}", operation_id="get_style", response_model=PreviewStyle)
async def get_style(
    style_id: Annotated[int, Path()],
    catalog: Annotated[StyleCatalog, Depends(get_style_catalog)],
):
    style = await catalog.get(style_id)
    if style is None:
        raise NotFoundError("Style not found")
    return style


@router.post(
    "",
    operation_id="create_style",
    response_model=PreviewStyle,
    status_code=status.HTTP_201_CREATED,
)
async def create_style(
    request_body: PreviewStyleCreate,
    catalog: Annotated[StyleCatalog, Depends(get_style_catalog)],
):
    return await catalog.create(request_body)
