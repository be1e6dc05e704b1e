"""Record stores that keep each collection as one serialized JSON array.

Subclasses only say where a collection's text lives (``_read``/``_write``).
Ids are ``max(existing ids) + 1``; a whole collection is rewritten on every
mutation, so a write either lands completely or not at all.
"""

import abc
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ValidationError as PydanticValidationError

from inventory_manager.core.errors import MediumCorruptError
from inventory_manager.db.seed import default_categories, default_products
from inventory_manager.schemas.category import CategoryResponse
from inventory_manager.schemas.product import ProductRecord, StockMovementCreate
from inventory_manager.stores.base import RecordStore

logger = logging.getLogger(__name__)

CATEGORIES = "categories"
PRODUCTS = "products"

_MODELS: dict[str, type[BaseModel]] = {
    CATEGORIES: CategoryResponse,
    PRODUCTS: ProductRecord,
}
_SEEDS = {
    CATEGORIES: default_categories,
    PRODUCTS: default_products,
}


def atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


def dump_records(records: list[BaseModel]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in records], ensure_ascii=False, indent=2)


def decode_records(collection: str, text: str) -> list:
    """Parse a stored collection. Raises ``MediumCorruptError`` on anything unreadable."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MediumCorruptError(f"{collection} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise MediumCorruptError(f"{collection} must be a JSON array, got {type(data).__name__}")
    model = _MODELS[collection]
    try:
        return [model.model_validate(item) for item in data]
    except PydanticValidationError as exc:
        raise MediumCorruptError(f"{collection} holds malformed records: {exc}") from exc


class DocumentRecordStore(RecordStore):

    @abc.abstractmethod
    def _read(self, collection: str) -> str | None:
        """Raw text of a collection, or None when nothing is stored yet."""

    @abc.abstractmethod
    def _write(self, collection: str, text: str) -> None:
        ...

    # ── loading / seeding ──

    def _seed(self, collection: str) -> list:
        records = _SEEDS[collection](datetime.now(timezone.utc))
        self._write(collection, dump_records(records))
        logger.info("Seeded %d default %s into %s", len(records), collection, self.label)
        return records

    def _load(self, collection: str) -> list:
        try:
            text = self._read(collection)
            if text is None:
                return self._seed(collection)
            return decode_records(collection, text)
        except MediumCorruptError as exc:
            logger.error("Corrupt %s in %s, restoring defaults: %s", collection, self.label, exc)
            return self._seed(collection)

    def _save(self, collection: str, records: list) -> None:
        self._write(collection, dump_records(records))

    async def initialize(self) -> None:
        # A collection emptied by deletes is not reseeded.
        for collection in (CATEGORIES, PRODUCTS):
            self._load(collection)

    # ── reads ──

    async def list_categories(self) -> list[CategoryResponse]:
        return sorted(self._load(CATEGORIES), key=lambda c: (c.name.casefold(), c.id))

    async def list_products(self) -> list[ProductRecord]:
        return self._load(PRODUCTS)

    async def get_product(self, product_id: int) -> ProductRecord | None:
        return next((p for p in self._load(PRODUCTS) if p.id == product_id), None)

    # ── writes ──

    async def insert_product(
        self, record: ProductRecord, movement: StockMovementCreate | None = None
    ) -> int:
        products = self._load(PRODUCTS)
        new_id = max((p.id for p in products), default=0) + 1
        products.append(record.model_copy(update={"id": new_id}))
        self._save(PRODUCTS, products)
        self._skip_movement(new_id, movement)
        return new_id

    async def replace_product(
        self, product_id: int, record: ProductRecord, movement: StockMovementCreate | None = None
    ) -> bool:
        products = self._load(PRODUCTS)
        for index, existing in enumerate(products):
            if existing.id == product_id:
                products[index] = record.model_copy(update={"id": product_id})
                self._save(PRODUCTS, products)
                self._skip_movement(product_id, movement)
                return True
        return False

    async def remove_product(self, product_id: int) -> bool:
        products = self._load(PRODUCTS)
        remaining = [p for p in products if p.id != product_id]
        if len(remaining) == len(products):
            return False
        self._save(PRODUCTS, remaining)
        return True

    # ── bulk ──

    def export_collections(self) -> dict[str, list[dict]]:
        return {
            collection: [r.model_dump(mode="json") for r in self._load(collection)]
            for collection in (CATEGORIES, PRODUCTS)
        }

    def import_collections(self, categories: list, products: list) -> None:
        """Replace both collections. Raises ``MediumCorruptError`` if either is malformed."""
        decoded = {
            collection: decode_records(collection, json.dumps(items, default=str))
            for collection, items in ((CATEGORIES, categories), (PRODUCTS, products))
        }
        for collection, records in decoded.items():
            self._save(collection, records)

    def reset(self) -> None:
        for collection in (CATEGORIES, PRODUCTS):
            self._seed(collection)
