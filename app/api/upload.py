"""File upload API."""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.core.deps import get_current_user
from app.models.user import User
from app.schemas.common import ApiResponse
from app.services.upload_service import UploadResult, save_image

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=ApiResponse[UploadResult], response_model_exclude_none=True)
async def upload_file(
    request: Request,
    file: UploadFile | None = File(default=None),
    current_user: User = Depends(get_current_user),
):
    """Upload a single JPG/PNG image and return its public URL."""
    result = await save_image(file, base_url=str(request.base_url))
    return ApiResponse(message="File uploaded successfully", data=result)
