"""Image upload API routes."""

from fastapi import APIRouter, File, Form, UploadFile

from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import services
from .schemas import ImageDeleteRequest, ImageUploadResponse

router = APIRouter(prefix="/storage", tags=["Storage"])


@router.post(
    "/images", response_model=BaseResponse[ImageUploadResponse], status_code=201
)
async def upload_image(
    current_user: CurrentUser,
    file: UploadFile = File(...),
    type: str = Form("common", description="Image category, e.g. common or parking"),
):
    """Upload a property image."""
    url = await services.save_image(file, type)
    return BaseResponse(success=True, data=ImageUploadResponse(url=url))


@router.delete("/images", response_model=BaseResponse[None])
async def delete_image(data: ImageDeleteRequest, current_user: CurrentUser):
    services.delete_image(data.url)
    return BaseResponse(success=True, message="Image deleted")
