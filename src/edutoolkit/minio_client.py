"""
Connection to the media object store holding course cover images.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional
from minio import Minio
from minio.error import S3Error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaStoreConfig:
    endpoint: str
    access_key: str
    secret_key: str
    secure: bool
    region: str
    bucket: str

    @classmethod
    def from_env(cls) -> "MediaStoreConfig":
        return cls(
            endpoint=os.environ.get('MINIO_ENDPOINT', 'localhost:9000'),
            access_key=os.environ.get('MINIO_ACCESS_KEY', 'minioadmin'),
            secret_key=os.environ.get('MINIO_SECRET_KEY', 'minioadmin'),
            secure=os.environ.get('MINIO_SECURE', 'false').lower() == 'true',
            region=os.environ.get('MINIO_REGION', 'us-east-1'),
            bucket=os.environ.get('MINIO_DEFAULT_BUCKET', 'edutoolkit-media'),
        )


media_store = MediaStoreConfig.from_env()

_minio_client: Optional[Minio] = None


def _ensure_media_bucket(client: Minio, config: MediaStoreConfig):
    try:
        if not client.bucket_exists(config.bucket):
            logger.info(f"Creating media bucket {config.bucket}")
            client.make_bucket(config.bucket, location=config.region)
    except S3Error as e:
        # Uploads retry the bucket check and report the failure themselves
        logger.warning(f"Media bucket {config.bucket} not available yet: {e}")


def get_minio_client() -> Minio:
    """Shared client for the media store, created on first use."""
    global _minio_client
    if _minio_client is None:
        logger.info(f"Connecting to media store at {media_store.endpoint}")
        _minio_client = Minio(
            media_store.endpoint,
            access_key=media_store.access_key,
            secret_key=media_store.secret_key,
            secure=media_store.secure,
            region=media_store.region
        )
        _ensure_media_bucket(_minio_client, media_store)
    return _minio_client


def reset_minio_client():
    global _minio_client
    _minio_client = None
