"""Mutation Service: create, update and delete products, and manage their images.

Every input is validated here, whatever backend sits underneath, so the HTTP
API, the serverless handler and the offline client reject the same payloads.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel, ValidationError as PydanticValidationError

from inventory_manager.core.errors import NotFoundError, ValidationError
from inventory_manager.schemas.product import (
    ProductCreate, ProductRecord, ProductUpdate, StockMovementCreate,
)
from inventory_manager.services.images import DEFAULT_MAX_BYTES, ImageStorage, validate_image
from inventory_manager.stores.base import RecordStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DeleteResult:
    """Outcome of a delete. ``warnings`` lists best-effort cleanups that failed."""
    product_id: int
    warnings: list[str] = field(default_factory=list)


def validate_payload(model: type[BaseModel], data: Any) -> BaseModel:
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        err = exc.errors()[0]
        loc = ".".join(str(p) for p in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        raise ValidationError(f"{loc}: {msg}" if loc else msg) from exc


def stock_movement(before: int, after: int, reason: str) -> StockMovementCreate | None:
    delta = after - before
    if delta == 0:
        return None
    return StockMovementCreate(
        movement_type="IN" if delta > 0 else "OUT",
        quantity=abs(delta),
        reason=reason,
    )


class ProductService:
    def __init__(
        self,
        store: RecordStore,
        images: ImageStorage,
        max_upload_bytes: int = DEFAULT_MAX_BYTES,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.images = images
        self.max_upload_bytes = max_upload_bytes
        self.clock = clock

    async def _check_category(self, category_id: int | None) -> None:
        if category_id is None:
            return
        categories = await self.store.list_categories()
        if not any(c.id == category_id for c in categories):
            raise ValidationError(f"Unknown category: {category_id}")

    def _check_stock(self, product_id: int, record: ProductRecord) -> None:
        if record.remaining_stock < 0:
            logger.warning(
                "Product %s has negative stock (%s), check recent movements",
                product_id, record.remaining_stock,
            )

    async def create_product(self, data: Any) -> int:
        payload: ProductCreate = validate_payload(ProductCreate, data)
        await self._check_category(payload.category_id)

        now = self.clock()
        record = ProductRecord(**payload.model_dump(), id=0, created_at=now, updated_at=now)
        movement = None
        if record.remaining_stock > 0:
            movement = stock_movement(0, record.remaining_stock, "Initial stock")

        product_id = await self.store.insert_product(record, movement)
        self._check_stock(product_id, record)
        logger.info("Created product %s (%s)", product_id, record.name)
        return product_id

    async def update_product(self, data: Any) -> ProductRecord:
        payload: ProductUpdate = validate_payload(ProductUpdate, data)
        existing = await self.store.get_product(payload.id)
        if existing is None:
            raise NotFoundError("Product not found")
        await self._check_category(payload.category_id)

        record = ProductRecord(
            **payload.model_dump(exclude={"id"}),
            id=existing.id,
            created_at=existing.created_at,
            updated_at=self.clock(),
        )
        movement = stock_movement(existing.remaining_stock, record.remaining_stock, "Product update")

        if not await self.store.replace_product(existing.id, record, movement):
            # Removed between the read and the write.
            raise NotFoundError("Product not found")
        self._check_stock(existing.id, record)
        logger.info("Updated product %s", existing.id)
        return record

    async def delete_product(self, product_id: int) -> DeleteResult:
        existing = await self.store.get_product(product_id)
        if existing is None:
            raise NotFoundError("Product not found")

        if not await self.store.remove_product(product_id):
            raise NotFoundError("Product not found")

        result = DeleteResult(product_id=product_id)
        if self.images.manages(existing.image_url):
            try:
                self.images.delete(existing.image_url)
            except (NotFoundError, ValidationError, OSError) as e:
                logger.warning("Could not remove image of product %s: %s", product_id, e)
                result.warnings.append(f"Image cleanup failed: {e}")

        logger.info("Deleted product %s", product_id)
        return result

    async def upload_image(self, filename: str | None, content_type: str | None, content: bytes) -> str:
        validate_image(content_type, len(content), self.max_upload_bytes)
        return self.images.save(filename, content_type, content)

    async def delete_image(self, image_url: str | None) -> None:
        if not image_url:
            return
        self.images.delete(image_url)
