"""Image upload and cleanup service."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol
from urllib.parse import unquote, urlparse
from uuid import uuid4

from cattle_keeper.domain.cattle import CattleRecord
from cattle_keeper.domain.images import StoredImage, UploadedImage
from cattle_keeper.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    """Blob storage for cattle photos."""

    def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """Store the blob and return its public URL."""

    def delete(self, filename: str) -> bool:
        """Remove a blob, returning false when it did not exist."""

    def inspect(self, filename: str) -> StoredImage | None:
        """Return blob metadata, if present."""


def check_filename(filename: str) -> str:
    """Reject names that could escape the managed directory."""
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        raise ValidationError("Invalid filename")
    return filename


def filename_from_url(url: str) -> str | None:
    """Return the stored filename referenced by a public image URL."""
    path = unquote(urlparse(url).path)
    name = PurePosixPath(path).name
    return name or None


@dataclass
class ImageService:
    """Validates uploads and manages stored images."""

    store: ImageStore
    max_size: int
    allowed_types: frozenset[str]

    def upload(
        self, original_name: str, content: bytes, content_type: str | None
    ) -> UploadedImage:
        """Store an uploaded image under a random filename."""
        if not content:
            raise ValidationError("No file uploaded")
        mimetype = (content_type or "").lower()
        if mimetype not in self.allowed_types:
            allowed = ", ".join(sorted(self.allowed_types))
            raise ValidationError(f"Invalid file type. Allowed types: {allowed}")
        if len(content) > self.max_size:
            raise ValidationError(
                f"File too large. Maximum size: {self.max_size} bytes"
            )
        extension = PurePosixPath(original_name or "").suffix.lower()
        filename = f"{uuid4()}{extension}"
        url = self.store.upload(filename, content, mimetype)
        logger.info("Uploaded image", extra={"image_filename": filename})
        return UploadedImage(
            url=url,
            filename=filename,
            original_name=original_name,
            size=len(content),
            mimetype=mimetype,
        )

    def delete(self, filename: str) -> None:
        """Delete a stored image."""
        if not self.store.delete(check_filename(filename)):
            raise NotFoundError("Image not found")

    def inspect(self, filename: str) -> StoredImage:
        """Return metadata for a stored image."""
        image = self.store.inspect(check_filename(filename))
        if image is None:
            raise NotFoundError("Image not found")
        return image

    def discard_cattle_image(self, record: CattleRecord) -> None:
        """Best-effort removal of a deleted animal's photo."""
        if not record.image_url:
            return
        filename = filename_from_url(record.image_url)
        if filename is None:
            return
        try:
            self.delete(filename)
        except Exception:
            logger.exception(
                "Failed to delete cattle image",
                extra={"cattle_id": record.id, "image_filename": filename},
            )
