# artmarket/core/storage_utils.py
import logging
import uuid
from typing import Any

from artmarket.core.config import get_settings
from artmarket.core.errors import Internal, InvalidArgument
from artmarket.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

# Storage folders and the transform applied when the public URL is built.
PRODUCT_IMAGES = "product-images"
PROFILE_IMAGES = "profile-images"
PORTFOLIO_IMAGES = "portfolio-images"
CUSTOM_ORDER_IMAGES = "custom-orders"

TRANSFORM_PROFILES: dict[str, dict[str, Any]] = {
    PRODUCT_IMAGES: {"width": 800, "height": 800, "resize": "cover"},
    PROFILE_IMAGES: {"width": 400, "height": 400, "resize": "cover"},
    PORTFOLIO_IMAGES: {"width": 1200, "height": 800, "resize": "cover"},
}


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"


def validate_image(content_type: str, file_bytes: bytes, max_bytes: int) -> str:
    """
    Check content type and size of an uploaded image.

    Returns:
        The file extension matching the content type.

    Raises:
        InvalidArgument: unsupported type or file too large.
    """
    if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
        raise InvalidArgument("Not an image! Please upload only JPEG, PNG, WEBP or GIF.")

    if len(file_bytes) > max_bytes:
        raise InvalidArgument(
            f"File too large! Maximum size is {max_bytes // (1024 * 1024)}MB."
        )

    return ALLOWED_IMAGE_CONTENT_TYPES[content_type]


class MediaStorage:
    """
    Thin wrapper over Supabase Storage used for every image upload.

    Failures of the storage SDK are logged and surfaced as Internal;
    nothing is retried.
    """

    def __init__(self, client, bucket: str, max_image_bytes: int):
        self.client = client
        self.bucket = bucket
        self.max_image_bytes = max_image_bytes

    def upload_image(self, folder: str, content_type: str, file_bytes: bytes) -> str:
        """
        Upload raw image bytes and return its public URL.

        Path pattern:
            <folder>/<uuid>.<ext>
        """
        ext = validate_image(content_type, file_bytes, self.max_image_bytes)
        path = f"{folder}/{generate_filename(ext)}"

        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(path, file_bytes, {"content-type": content_type, "upsert": "true"})
        except Exception as exc:
            logger.exception("Error uploading image to %s", path)
            raise Internal("Failed to upload image") from exc

        transform = TRANSFORM_PROFILES.get(folder)
        if transform:
            return bucket.get_public_url(path, {"transform": transform})
        return bucket.get_public_url(path)

    def upload_many(
        self,
        folder: str,
        files: list[tuple[str, bytes]],
    ) -> list[str]:
        """Upload (content_type, bytes) pairs in order."""
        return [self.upload_image(folder, ct, data) for ct, data in files]

    def extract_path_from_public_url(self, url: str) -> str | None:
        """
        Given a public URL, extract the object path relative to the bucket.

        Example:
            https://<proj>.supabase.co/storage/v1/object/public/assets/product-images/a.png?width=800
            -> 'product-images/a.png'
        """
        for marker in (
            f"/storage/v1/object/public/{self.bucket}/",
            f"/storage/v1/render/image/public/{self.bucket}/",
        ):
            idx = url.find(marker)
            if idx != -1:
                return url[idx + len(marker) :].split("?", 1)[0]
        return None

    def delete_public_url(self, url: str) -> None:
        """
        Delete a file by its public URL.
        No-op if the URL does not belong to this bucket.
        """
        path = self.extract_path_from_public_url(url)
        if not path:
            return
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as exc:
            logger.exception("Error deleting image %s", path)
            raise Internal("Failed to delete image") from exc


def get_media_storage() -> MediaStorage:
    """FastAPI dependency returning the Storage-backed media collaborator."""
    settings = get_settings()
    return MediaStorage(
        supabase_admin(),
        bucket=settings.STORAGE_BUCKET,
        max_image_bytes=settings.MAX_IMAGE_BYTES,
    )
