"""
Routes: /files — serve stored files and issue signed URLs.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse

from src.api.dependencies import get_current_user, get_storage
from src.api.schemas.responses import SignedUrlResponse
from src.config.settings import get_settings
from src.core.entities.user import User
from src.core.interfaces.storage_service import IStorageService

logger = logging.getLogger(__name__)

router = APIRouter()


# Declared before the catch-all file route so "signed/..." is not served as a file
@router.get("/files/signed/{path:path}", response_model=SignedUrlResponse)
async def get_signed_url(
    path: str,
    ttl: int | None = Query(None, ge=1, le=7 * 24 * 3600),
    _user: User = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage),
):
    """Temporary URL for a stored file; existence is checked first."""
    storage.load_as_resource(path)
    expires_in = ttl or get_settings().signed_url_default_ttl
    return SignedUrlResponse(url=storage.get_signed_url(path, expires_in), expires_in=expires_in)


@router.get("/files/{path:path}")
async def serve_file(
    path: str,
    token: str | None = None,
    storage: IStorageService = Depends(get_storage),
):
    if get_settings().storage_require_signed_urls or token is not None:
        if not token or not storage.verify_signed_url(path, token):
            raise HTTPException(status_code=403, detail="Invalid or expired signed URL")

    resource = storage.load_as_resource(path)
    return FileResponse(resource.path, media_type=resource.content_type)
