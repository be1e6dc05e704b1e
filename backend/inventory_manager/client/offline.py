"""Offline backend: the networked API's contract served from local storage.

Listings are not paginated here; the facade shapes them into the paged
contract. Images are inlined as data URIs, so deleting one is a no-op.
"""

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable

from inventory_manager.core.errors import InventoryError
from inventory_manager.services.images import DEFAULT_MAX_BYTES, InlineImageStorage
from inventory_manager.services.products import ProductService
from inventory_manager.services.query import QueryEngine
from inventory_manager.stores.local_storage import LocalStorage, LocalStorageRecordStore

logger = logging.getLogger(__name__)


class OfflineApi:
    def __init__(
        self,
        storage: LocalStorage | None = None,
        max_upload_bytes: int = DEFAULT_MAX_BYTES,
        placeholder: str = "Unknown",
    ):
        self.store = LocalStorageRecordStore(storage or LocalStorage())
        self.queries = QueryEngine(self.store, placeholder)
        self.products = ProductService(self.store, InlineImageStorage(), max_upload_bytes)
        self._ready = False

    async def _run(self, action: Callable[[], Awaitable[dict]]) -> dict:
        if not self._ready:
            await self.store.initialize()
            self._ready = True
        try:
            return await action()
        except InventoryError as exc:
            return {"success": False, "error": exc.message}

    # Categories
    async def get_categories(self) -> dict:
        async def action():
            categories = await self.queries.list_categories()
            return {"success": True, "categories": [c.model_dump(mode="json") for c in categories]}
        return await self._run(action)

    # Products
    async def get_products(self, search: str = "", category: str = "all") -> dict:
        async def action():
            products = await self.queries.filter_products(search, category)
            return {"success": True, "products": [p.model_dump(mode="json") for p in products]}
        return await self._run(action)

    async def create_product(self, data: dict) -> dict:
        async def action():
            return {"success": True, "id": await self.products.create_product(data)}
        return await self._run(action)

    async def update_product(self, data: dict) -> dict:
        async def action():
            await self.products.update_product(data)
            return {"success": True}
        return await self._run(action)

    async def delete_product(self, product_id: int) -> dict:
        async def action():
            await self.products.delete_product(product_id)
            return {"success": True}
        return await self._run(action)

    # Images
    async def upload_image(self, filename: str, content_type: str, content: bytes) -> dict:
        async def action():
            image_url = await self.products.upload_image(filename, content_type, content)
            return {"success": True, "imageUrl": image_url}
        return await self._run(action)

    async def delete_image(self, image_url: str) -> dict:
        async def action():
            await self.products.delete_image(image_url)
            return {"success": True}
        return await self._run(action)

    # Backup / restore of the local data set
    def export_data(self) -> dict:
        data = self.store.export_collections()
        data["exportDate"] = datetime.now(timezone.utc).isoformat()
        return data

    def import_data(self, data: dict) -> None:
        """Replace local categories and products. Raises ``MediumCorruptError`` on malformed input."""
        self.store.import_collections(data.get("categories", []), data.get("products", []))
        self._ready = True
        logger.info("Imported offline data set")

    def reset_data(self) -> None:
        self.store.reset()
        self._ready = True
