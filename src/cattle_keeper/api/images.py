"""Image upload endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from cattle_keeper.api.auth import require_api_key
from cattle_keeper.errors import ValidationError

if TYPE_CHECKING:
    from cattle_keeper.containers import AppContainer

router = APIRouter(
    prefix="/images", tags=["images"], dependencies=[Depends(require_api_key)]
)


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request, file: UploadFile | None = File(default=None)
) -> dict[str, object]:
    """Store an uploaded photo and return its public URL."""
    container: AppContainer = request.app.state.container
    if file is None:
        raise ValidationError("No file uploaded")
    content = await file.read()
    image = container.image_service.upload(
        file.filename or "", content, file.content_type
    )
    return {
        "success": True,
        "data": {
            "url": image.url,
            "filename": image.filename,
            "originalName": image.original_name,
            "size": image.size,
            "mimetype": image.mimetype,
        },
    }


@router.get("/{filename}")
async def image_info(filename: str, request: Request) -> dict[str, object]:
    """Return metadata for a stored image."""
    container: AppContainer = request.app.state.container
    image = container.image_service.inspect(filename)
    return {
        "success": True,
        "data": {
            "filename": image.filename,
            "size": image.size,
            "created": image.created.isoformat() if image.created else None,
            "modified": image.modified.isoformat() if image.modified else None,
        },
    }


@router.delete("/{filename}")
async def delete_image(filename: str, request: Request) -> dict[str, object]:
    """Delete a stored image."""
    container: AppContainer = request.app.state.container
    container.image_service.delete(filename)
    return {"success": True, "message": "Image deleted successfully"}
