"""Domain models for stored images."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UploadedImage:
    """Result of an image upload."""

    url: str
    filename: str
    original_name: str
    size: int
    mimetype: str


@dataclass(frozen=True)
class StoredImage:
    """Metadata for an image held by the image store."""

    filename: str
    size: int
    created: datetime | None
    modified: datetime | None
