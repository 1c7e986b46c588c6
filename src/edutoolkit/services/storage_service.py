import io
import logging
import os
from typing import Optional
from minio.error import S3Error

from ..minio_client import get_minio_client, media_store
from ..api.exceptions import ServiceUnavailableException, BadRequestException

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE = int(os.environ.get('MINIO_MAX_UPLOAD_SIZE', 5 * 1024 * 1024))  # 5MB default


def public_base_url() -> str:
    """Base URL under which objects of the media bucket are publicly readable."""
    configured = os.environ.get('MINIO_PUBLIC_URL')
    if configured:
        return configured.rstrip('/')
    scheme = 'https' if media_store.secure else 'http'
    return f"{scheme}://{media_store.endpoint}/{media_store.bucket}"


IMAGE_MIME_TYPES = {
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
}


def course_cover_key(course_id: str) -> str:
    # Fixed name: a new upload replaces the previous cover
    return f"courses/{course_id}/cover_image"


class StorageService:
    """Binary object store for course media"""
    
    def __init__(self):
        self.client = get_minio_client()
        self.default_bucket = media_store.bucket
        self.public_url = public_base_url()
    
    async def ensure_bucket_exists(self, bucket_name: Optional[str] = None) -> str:
        """Ensure bucket exists, create if it doesn't"""
        bucket = bucket_name or self.default_bucket
        try:
            if not self.client.bucket_exists(bucket):
                self.client.make_bucket(bucket)
                logger.info(f"Created bucket: {bucket}")
        except S3Error as e:
            logger.error(f"Error ensuring bucket exists: {e}")
            raise ServiceUnavailableException(f"Storage service error: {e}")
        return bucket
    
    async def upload_bytes(self, data: bytes, object_key: str, content_type: Optional[str] = None) -> str:
        """
        Store ``data`` under ``object_key`` and return its public URL.
        """
        if len(data) == 0:
            raise BadRequestException("Empty upload")
        if len(data) > MAX_UPLOAD_SIZE:
            raise BadRequestException(f"File exceeds maximum size of {MAX_UPLOAD_SIZE} bytes")
        
        bucket = await self.ensure_bucket_exists()
        
        try:
            self.client.put_object(
                bucket_name=bucket,
                object_name=object_key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type or 'application/octet-stream'
            )
        except S3Error as e:
            logger.error(f"Error uploading object {object_key}: {e}")
            raise ServiceUnavailableException(f"Failed to upload file: {e}")
        
        logger.info(f"Uploaded object: {bucket}/{object_key}")
        return f"{self.public_url}/{object_key}"
    
    async def upload_course_cover(self, course_id: str, data: bytes, content_type: Optional[str]) -> str:
        if content_type not in IMAGE_MIME_TYPES:
            raise BadRequestException(f"Unsupported image type: {content_type}")
        return await self.upload_bytes(data, course_cover_key(course_id), content_type)


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
