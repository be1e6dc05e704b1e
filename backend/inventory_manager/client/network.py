"""HTTP client for the networked backend (``/api`` on the inventory server)."""

import logging

import httpx

from inventory_manager.client.results import ApiResult

logger = logging.getLogger(__name__)

# The server answers these when it cannot reach its own database.
UNAVAILABLE_STATUSES = {502, 503, 504}


class NetworkApi:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> ApiResult:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            return ApiResult.transport_failure(f"{type(exc).__name__}: {exc}")

        if response.status_code in UNAVAILABLE_STATUSES:
            return ApiResult.transport_failure(
                f"Backend unavailable (HTTP {response.status_code})", response.status_code
            )
        try:
            payload = response.json()
        except ValueError:
            return ApiResult.transport_failure(
                f"Malformed response (HTTP {response.status_code})", response.status_code
            )
        if not isinstance(payload, dict) or not isinstance(payload.get("success"), bool):
            return ApiResult.transport_failure(
                f"Unexpected response shape (HTTP {response.status_code})", response.status_code
            )
        return ApiResult.from_payload(payload, response.status_code)

    # Categories
    async def get_categories(self) -> ApiResult:
        return await self._request("GET", "/categories")

    # Products
    async def get_products(
        self,
        search: str = "",
        category: str = "all",
        page: int = 1,
        limit: int = 50,
        sort_by: str = "created_at",
        sort_order: str = "DESC",
    ) -> ApiResult:
        params = {}
        if search:
            params["search"] = search
        if category != "all":
            params["category"] = category
        params.update(page=page, limit=limit, sortBy=sort_by, sortOrder=sort_order)
        return await self._request("GET", "/products", params=params)

    async def get_product_by_id(self, product_id: int) -> ApiResult:
        return await self._request("GET", f"/products/{product_id}")

    async def create_product(self, data: dict) -> ApiResult:
        return await self._request("POST", "/products", json=data)

    async def update_product(self, data: dict) -> ApiResult:
        return await self._request("PUT", "/products", json=data)

    async def delete_product(self, product_id: int) -> ApiResult:
        return await self._request("DELETE", "/products", params={"id": product_id})

    # Images
    async def upload_image(self, filename: str, content_type: str, content: bytes) -> ApiResult:
        return await self._request(
            "POST", "/upload", files={"image": (filename, content, content_type)}
        )

    async def delete_image(self, image_url: str) -> ApiResult:
        return await self._request("DELETE", "/upload", json={"imageUrl": image_url})
