"""Supabase Storage implementation of the image store."""

import logging
from dataclasses import dataclass

from supabase import Client

from cattle_keeper.adapters.supabase_errors import storage_errors
from cattle_keeper.domain.images import StoredImage
from cattle_keeper.domain.timestamps import parse_timestamp
from cattle_keeper.services.images import ImageStore

logger = logging.getLogger(__name__)


@dataclass
class SupabaseImageStore(ImageStore):
    """Stores cattle photos in a public Supabase Storage bucket."""

    client: Client
    bucket: str
    max_size: int

    def ensure_bucket(self) -> None:
        """Create the bucket when it does not exist yet."""
        with storage_errors("Failed to initialise image bucket"):
            buckets = self.client.storage.list_buckets()
            if any(bucket.name == self.bucket for bucket in buckets or []):
                return
            self.client.storage.create_bucket(
                self.bucket,
                options={"public": True, "file_size_limit": self.max_size},
            )
        logger.info("Created image bucket", extra={"bucket": self.bucket})

    def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """Upload a blob and return its public URL."""
        with storage_errors("Failed to upload image"):
            bucket = self.client.storage.from_(self.bucket)
            bucket.upload(
                path=filename,
                file=content,
                file_options={"content-type": content_type},
            )
            return bucket.get_public_url(filename)

    def delete(self, filename: str) -> bool:
        """Remove a blob from the bucket."""
        with storage_errors("Failed to delete image"):
            removed = self.client.storage.from_(self.bucket).remove([filename])
        return bool(removed)

    def inspect(self, filename: str) -> StoredImage | None:
        """Return blob metadata from the bucket listing."""
        with storage_errors("Failed to get image info"):
            objects = self.client.storage.from_(self.bucket).list(
                "", {"search": filename}
            )
        for item in objects or []:
            if item.get("name") != filename:
                continue
            metadata = item.get("metadata") or {}
            return StoredImage(
                filename=filename,
                size=int(metadata.get("size") or 0),
                created=parse_timestamp(item.get("created_at")),
                modified=parse_timestamp(item.get("updated_at")),
            )
        return None
