"""File upload routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, status

from ...api.dependencies import get_current_verified_user, get_storage_service
from ...domain.entities.user import User
from ...domain.services.file_storage import IFileStorage

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_UPLOAD_BYTES = 25 * 1024 * 1024


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_verified_user),
    storage: IFileStorage = Depends(get_storage_service)
):
    """Store a resource file; the returned url/path go into the submission"""
    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit"
        )

    file_name = file.filename or "unnamed"
    stored = await storage.store(data, file_name, file.content_type)
    logger.info(f"User {current_user.id} uploaded {stored.path} ({len(data)} bytes)")

    return {
        "success": True,
        "file_url": stored.url,
        "storage_path": stored.path,
        "file_name": file_name,
        "file_size": f"{len(data) / (1024 * 1024):.2f} MB",
        "file_type": file.content_type or "application/octet-stream",
    }
