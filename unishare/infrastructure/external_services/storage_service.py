"""Storage service using MinIO"""

import asyncio
import logging
import uuid
from io import BytesIO
from typing import Optional
from urllib.parse import unquote, urlparse

from minio import Minio

from ...core.config import settings
from ...domain.services.file_storage import IFileStorage, StoredObject, DeleteResult

logger = logging.getLogger(__name__)


class StorageService(IFileStorage):

    def __init__(self, client: Optional[Minio] = None):
        self.client = client or Minio(
            endpoint=settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE
        )
        self.bucket = settings.MINIO_BUCKET_NAME
        protocol = "https" if settings.MINIO_SECURE else "http"
        self.public_base = f"{protocol}://{settings.MINIO_ENDPOINT}/{self.bucket}/"
        self._bucket_checked = False

    def _ensure_bucket_exists(self):
        """Ensure bucket exists"""
        if self._bucket_checked:
            return
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
        self._bucket_checked = True

    def _put(self, data: bytes, object_name: str, content_type: str) -> None:
        self._ensure_bucket_exists()
        self.client.put_object(
            bucket_name=self.bucket,
            object_name=object_name,
            data=BytesIO(data),
            length=len(data),
            content_type=content_type
        )

    async def store(self, data: bytes, name: str, content_type: Optional[str] = None) -> StoredObject:
        """Upload file and return its public URL and object path"""
        object_name = f"resources/{uuid.uuid4().hex}_{name}"
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, self._put, data, object_name, content_type or "application/octet-stream"
        )
        return StoredObject(url=f"{self.public_base}{object_name}", path=object_name)

    async def delete(self, path: str) -> DeleteResult:
        """Delete an object by path; failures are reported in the result"""
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self.client.remove_object, self.bucket, path)
        except Exception as e:
            logger.warning(f"Failed to delete object {path}: {e}")
            return DeleteResult(success=False, error=str(e))
        return DeleteResult(success=True)

    def path_from_url(self, url: str) -> Optional[str]:
        """Object path for a URL served from our bucket; None for external URLs"""
        if not url or not url.startswith(self.public_base):
            return None
        path = unquote(urlparse(url).path)
        prefix = f"/{self.bucket}/"
        return path[len(prefix):] if path.startswith(prefix) else None
