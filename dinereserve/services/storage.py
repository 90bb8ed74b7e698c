"""Object storage for restaurant images."""

import logging
import secrets
import time
from typing import Protocol

import httpx

from dinereserve.config import Config
from dinereserve.errors import InvalidUploadError, UpstreamError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def validate_image(content_type: str, size: int, max_bytes: int) -> None:
    """Reject uploads with the wrong type or size.

    Raises:
        InvalidUploadError: With a message suitable for the user
    """
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadError(
            "Invalid file type. Only JPG, PNG, and WebP images are allowed."
        )
    if size > max_bytes:
        raise InvalidUploadError(
            f"File size exceeds {max_bytes // (1024 * 1024)}MB limit."
        )


def build_object_key(restaurant_id: str, content_type: str) -> str:
    """restaurants/{restaurant_id}/{millis}-{random}.{ext}, ext from the content type."""
    ext = ALLOWED_CONTENT_TYPES[content_type]
    millis = int(time.time() * 1000)
    return f"restaurants/{restaurant_id}/{millis}-{secrets.token_hex(4)}.{ext}"


class ImageStorage(Protocol):
    def upload(
        self, content: bytes, filename: str, content_type: str, restaurant_id: str
    ) -> str: ...


class InMemoryImageStorage:
    """Keeps uploads in memory and serves them under a configured base URL."""

    def __init__(self, public_base_url: str, max_bytes: int) -> None:
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes
        self.objects: dict[str, tuple[str, bytes]] = {}

    def upload(
        self, content: bytes, filename: str, content_type: str, restaurant_id: str
    ) -> str:
        validate_image(content_type, len(content), self.max_bytes)
        key = build_object_key(restaurant_id, content_type)
        self.objects[key] = (content_type, content)
        logger.info(f"Stored {filename!r} ({len(content)} bytes) at {key} (in memory)")
        return f"{self.public_base_url}/{key}"


class SupabaseImageStorage:
    """Uploads images to a Supabase Storage bucket over its REST API."""

    def __init__(self, config: Config, client: httpx.Client | None = None) -> None:
        """Initialize the storage client.

        Args:
            config: Needs supabase_url, supabase_key and storage_bucket
            client: Optional preconfigured httpx client (tests inject one)
        """
        if not config.has_supabase_config():
            raise ValueError("Supabase is not configured")

        self.base_url = config.supabase_url.rstrip("/")
        self.bucket = config.storage_bucket
        self.max_bytes = config.max_upload_bytes
        self.client = client or httpx.Client(
            timeout=30.0,
            headers={
                "Authorization": f"Bearer {config.supabase_key}",
                "apikey": config.supabase_key,
            },
        )

    def upload(
        self, content: bytes, filename: str, content_type: str, restaurant_id: str
    ) -> str:
        """Upload an image and return its public URL.

        Raises:
            InvalidUploadError: If type or size validation fails
            UpstreamError: If Supabase rejects the upload
        """
        validate_image(content_type, len(content), self.max_bytes)
        key = build_object_key(restaurant_id, content_type)

        try:
            response = self.client.post(
                f"{self.base_url}/storage/v1/object/{self.bucket}/{key}",
                content=content,
                headers={
                    "Content-Type": content_type,
                    "Cache-Control": "3600",
                    "x-upsert": "false",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.exception("Failed to upload image")
            raise UpstreamError(f"Image upload failed: {e}") from e

        logger.info(f"Uploaded {filename!r} to {self.bucket}/{key}")
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{key}"
