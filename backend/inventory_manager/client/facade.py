"""Data Access Facade: the single entry point for the presentation layer.

Every call tries the networked backend first. Only a transport failure
(unreachable server, timeout, malformed answer) re-issues the call against
the offline backend; application errors from a reachable server come back
untouched. There is no sticky offline mode: the next call probes the network
again.
"""

import logging
from typing import Awaitable, Callable

from inventory_manager.client.network import NetworkApi
from inventory_manager.client.offline import OfflineApi
from inventory_manager.client.results import ApiResult
from inventory_manager.core.config import Settings
from inventory_manager.schemas.product import Pagination
from inventory_manager.stores.local_storage import LocalStorage

logger = logging.getLogger(__name__)


class DataAccessFacade:
    def __init__(
        self,
        network: NetworkApi,
        offline: OfflineApi,
        on_fallback: Callable[[str], None] | None = None,
    ):
        self.network = network
        self.offline = offline
        self.on_fallback = on_fallback
        self.degraded = False  # whether the last call was served offline

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "DataAccessFacade":
        network = NetworkApi(settings.API_BASE_URL, timeout=settings.CLIENT_TIMEOUT)
        offline = OfflineApi(
            LocalStorage(settings.OFFLINE_STORAGE_PATH),
            max_upload_bytes=settings.MAX_FILE_SIZE,
            placeholder=settings.CATEGORY_PLACEHOLDER,
        )
        return cls(network, offline, **kwargs)

    async def aclose(self) -> None:
        await self.network.aclose()

    async def __aenter__(self) -> "DataAccessFacade":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _resolve(
        self, operation: str, result: ApiResult, offline: Callable[[], Awaitable[dict]]
    ) -> dict:
        if not result.is_transport_failure:
            self.degraded = False
            return result.payload
        logger.warning(
            "Backend unavailable, falling back to offline mode for %s (%s)", operation, result.error
        )
        self.degraded = True
        if self.on_fallback is not None:
            self.on_fallback(operation)
        return await offline()

    # Categories
    async def get_categories(self) -> dict:
        result = await self.network.get_categories()
        return await self._resolve("categories", result, self.offline.get_categories)

    # Products
    async def get_products(
        self,
        search: str = "",
        category: str = "all",
        page: int = 1,
        limit: int = 50,
        sort_by: str = "created_at",
        sort_order: str = "DESC",
    ) -> dict:
        result = await self.network.get_products(search, category, page, limit, sort_by, sort_order)

        async def offline():
            listing = await self.offline.get_products(search, category)
            if not listing["success"]:
                return listing
            pagination = Pagination.single_page(page, limit, len(listing["products"]))
            return {**listing, "pagination": pagination.model_dump(by_alias=True)}

        return await self._resolve("products", result, offline)

    async def get_product_by_id(self, product_id: int) -> dict:
        # No offline equivalent: report the failure instead of an empty product.
        result = await self.network.get_product_by_id(product_id)
        self.degraded = False
        if result.is_transport_failure:
            logger.warning("Backend unavailable for product %s (%s)", product_id, result.error)
            return {"success": False, "error": "Backend unavailable"}
        return result.payload

    async def create_product(self, data: dict) -> dict:
        result = await self.network.create_product(data)
        return await self._resolve("create product", result, lambda: self.offline.create_product(data))

    async def update_product(self, data: dict) -> dict:
        result = await self.network.update_product(data)
        return await self._resolve("update product", result, lambda: self.offline.update_product(data))

    async def delete_product(self, product_id: int) -> dict:
        result = await self.network.delete_product(product_id)
        return await self._resolve(
            "delete product", result, lambda: self.offline.delete_product(product_id)
        )

    # Images
    async def upload_image(self, filename: str, content_type: str, content: bytes) -> dict:
        result = await self.network.upload_image(filename, content_type, content)
        return await self._resolve(
            "image upload", result,
            lambda: self.offline.upload_image(filename, content_type, content),
        )

    async def delete_image(self, image_url: str) -> dict:
        result = await self.network.delete_image(image_url)
        return await self._resolve(
            "delete image", result, lambda: self.offline.delete_image(image_url)
        )
