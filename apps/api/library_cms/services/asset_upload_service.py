"""Public asset storage for images and media files.

Assets are written under a logical folder ("stories", "libraries/logos", ...)
and addressed by a public URL. Backends: local filesystem (dev) or S3.
"""

import io
import logging
import os
import uuid
from dataclasses import dataclass

import boto3

from library_cms.core.config import settings
from library_cms.core.errors import ValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp", "svg", "mp4", "webm", "mp3"}
ALLOWED_MIME_PREFIXES = ("image/", "video/", "audio/")


@dataclass
class UploadedAsset:
    """A file already read off the request."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _get_s3_client():
    """Get boto3 S3 client."""
    return boto3.client("s3", region_name=settings.S3_REGION)


def _get_local_storage_path() -> str:
    """Get local storage directory path."""
    path = settings.LOCAL_STORAGE_PATH
    os.makedirs(path, exist_ok=True)
    return path


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def _public_url(storage_key: str) -> str:
    if settings.STORAGE_BACKEND == "s3":
        return f"https://{settings.S3_BUCKET}.s3.{settings.S3_REGION}.amazonaws.com/{storage_key}"
    return f"{settings.ASSET_PUBLIC_BASE_URL.rstrip('/')}/{storage_key}"


def _storage_key_from_url(url: str) -> str:
    if settings.STORAGE_BACKEND == "s3":
        prefix = f"https://{settings.S3_BUCKET}.s3.{settings.S3_REGION}.amazonaws.com/"
    else:
        prefix = f"{settings.ASSET_PUBLIC_BASE_URL.rstrip('/')}/"
    return url[len(prefix):] if url.startswith(prefix) else url


# =============================================================================
# Operations
# =============================================================================

def validate_asset(asset: UploadedAsset) -> None:
    """
    Validate file type and size before any storage call.
    
    Raises:
        ValidationError: unsupported type, empty file, or file too large
    """
    ext = _extension(asset.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"File type '.{ext}' not allowed")
    if not asset.content_type.startswith(ALLOWED_MIME_PREFIXES):
        raise ValidationError(f"Content type '{asset.content_type}' not allowed")
    if asset.size == 0:
        raise ValidationError("Uploaded file is empty")
    if asset.size > settings.max_upload_bytes:
        raise ValidationError(f"File exceeds {settings.MAX_UPLOAD_SIZE_MB} MB limit")


def upload_image(asset: UploadedAsset, folder: str) -> str:
    """Store an asset under ``folder`` and return its public URL."""
    storage_key = f"{folder.strip('/')}/{uuid.uuid4()}.{_extension(asset.filename)}"
    
    if settings.STORAGE_BACKEND == "s3":
        s3 = _get_s3_client()
        s3.upload_fileobj(
            io.BytesIO(asset.data),
            settings.S3_BUCKET,
            storage_key,
            ExtraArgs={"ContentType": asset.content_type},
        )
    else:
        path = os.path.join(_get_local_storage_path(), storage_key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(asset.data)
    
    logger.info("asset_uploaded", extra={"storage_key": storage_key, "size": asset.size})
    return _public_url(storage_key)


def delete_image(url_or_key: str) -> bool:
    """Delete a stored asset. Returns False if it did not exist (local backend)."""
    storage_key = _storage_key_from_url(url_or_key)
    
    if settings.STORAGE_BACKEND == "s3":
        s3 = _get_s3_client()
        s3.delete_object(Bucket=settings.S3_BUCKET, Key=storage_key)
        logger.info("asset_deleted", extra={"storage_key": storage_key})
        return True
    
    root = os.path.realpath(_get_local_storage_path())
    path = os.path.realpath(os.path.join(root, storage_key))
    if not path.startswith(root + os.sep):
        raise ValidationError("Invalid asset path")
    if not os.path.exists(path):
        return False
    os.remove(path)
    logger.info("asset_deleted", extra={"storage_key": storage_key})
    return True
