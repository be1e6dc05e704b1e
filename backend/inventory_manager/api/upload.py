"""Image upload endpoints. Stored files are served under ``/uploads``."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from inventory_manager.core.deps import get_product_service
from inventory_manager.core.errors import PayloadTooLargeError
from inventory_manager.schemas.common import ImageDeleteRequest, SuccessResponse, UploadResponse
from inventory_manager.services.products import ProductService

router = APIRouter(prefix="/api/upload", tags=["upload"])

CHUNK_SIZE = 64 * 1024


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes:
    # Check Content-Length first (if available) to reject early
    if file.size and file.size > max_bytes:
        raise PayloadTooLargeError(f"File too large. Max {max_bytes} bytes")

    chunks = []
    total_size = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_bytes:
            raise PayloadTooLargeError(f"File too large. Max {max_bytes} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("", response_model=UploadResponse)
async def upload_image(
    image: UploadFile | None = File(None),
    service: ProductService = Depends(get_product_service),
):
    if image is None:
        raise HTTPException(400, "No file uploaded")
    content = await _read_limited(image, service.max_upload_bytes)
    image_url = await service.upload_image(image.filename, image.content_type, content)
    return UploadResponse(image_url=image_url)


@router.delete("", response_model=SuccessResponse, response_model_exclude_none=True)
async def delete_image(
    body: ImageDeleteRequest | None = None,
    service: ProductService = Depends(get_product_service),
):
    await service.delete_image(body.image_url if body else None)
    return SuccessResponse()
