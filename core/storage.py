import logging
import os
from typing import NamedTuple, Optional

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.exceptions import InternalError, ValidationError
from core.settings import settings

logger = logging.getLogger(__name__)


class StoredAsset(NamedTuple):
    url: str
    asset_id: str


def get_upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def validate_image(upload: Optional[UploadFile], label: str) -> UploadFile:
    """Reject a missing or oversized image upload."""
    if upload is None or not upload.filename:
        raise ValidationError(f"{label} is required")
    if get_upload_size(upload) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError("Image size should be less than 1MB")
    return upload


class AssetStorage:
    """Thin async facade over the Cloudinary uploader."""

    def __init__(self):
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )

    async def upload(self, upload: UploadFile, folder: str) -> StoredAsset:
        upload.file.seek(0)
        result = await run_in_threadpool(
            cloudinary.uploader.upload,
            upload.file,
            resource_type="image",
            folder=folder,
        )
        if not result.get("secure_url"):
            raise InternalError("Failed to upload image to cloudinary")
        return StoredAsset(url=result["secure_url"], asset_id=result["public_id"])

    async def delete(self, asset_id: str) -> None:
        await run_in_threadpool(cloudinary.uploader.destroy, asset_id)

    async def delete_quietly(self, asset_id: Optional[str]) -> None:
        if not asset_id:
            return
        try:
            await self.delete(asset_id)
        except Exception as e:
            logger.warning(f"Failed to delete asset {asset_id} from cloudinary: {e}")


asset_storage = AssetStorage()


def get_asset_storage() -> AssetStorage:
    return asset_storage
