"""
Routes: /images — upload and delete stored images.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from src.api.dependencies import (
    get_current_user,
    get_storage,
    get_upload_limit,
    get_upload_use_case,
    require_admin,
)
from src.api.schemas.responses import MessageResponse, UploadResponse
from src.core.entities.user import User
from src.core.exceptions import StorageFileNotFoundError
from src.core.interfaces.file_validator import UploadedFile
from src.core.interfaces.storage_service import IStorageService
from src.core.use_cases.upload_image import UploadImageUseCase

router = APIRouter()


async def read_upload(file: UploadFile, max_bytes: int) -> UploadedFile:
    """
    Buffer a multipart upload into the domain type.

    At most `max_bytes` are read; anything larger is still rejected by the
    validator's size check, since the truncated body exceeds its limit.
    """
    data = await file.read(max_bytes)
    return UploadedFile(filename=file.filename or "", content_type=file.content_type, data=data)


@router.post("/images/upload", response_model=UploadResponse)
async def upload_image(
    file: UploadFile = File(...),
    _user: User = Depends(get_current_user),
    use_case: UploadImageUseCase = Depends(get_upload_use_case),
    upload_limit: int = Depends(get_upload_limit),
):
    """
    Upload an image (JPEG/PNG/GIF/WebP).

    Returns the generated file name, its public URL and content type.
    """
    uploaded = use_case.execute(await read_upload(file, upload_limit))
    return UploadResponse(file_name=uploaded.file_name, url=uploaded.url, file_type=uploaded.file_type)


@router.delete("/images/{key:path}", response_model=MessageResponse)
async def delete_image(
    key: str,
    _admin: User = Depends(require_admin),
    storage: IStorageService = Depends(get_storage),
):
    if not storage.delete(key):
        raise StorageFileNotFoundError(f"Could not read file: {key}")
    return MessageResponse(message="Image deleted successfully")
