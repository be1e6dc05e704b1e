"""Serverless entry point (Netlify / AWS Lambda proxy events) over JSON files.

Demo deployment without a database: the function's writable ``/tmp`` holds
``categories.json`` and ``products.json``. Responses use the same envelopes as
the HTTP API.
"""

import asyncio
import json
import logging

from inventory_manager.core.config import settings
from inventory_manager.core.errors import InventoryError, ValidationError
from inventory_manager.services.images import InlineImageStorage
from inventory_manager.services.products import ProductService
from inventory_manager.services.query import ProductQuery, QueryEngine
from inventory_manager.stores.json_file import JsonFileRecordStore

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Content-Type": "application/json",
}

PLACEHOLDER = "Aucune"


def _response(status_code: int, payload: dict | None = None) -> dict:
    response = {"statusCode": status_code, "headers": dict(CORS_HEADERS)}
    if payload is not None:
        response["body"] = json.dumps(payload, ensure_ascii=False, default=str)
    return response


def _json_body(event: dict) -> dict:
    try:
        return json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON body: {exc.msg}") from exc


def _parse_id(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid product ID")


class ServerlessApp:
    def __init__(self, data_dir: str):
        self.store = JsonFileRecordStore(data_dir)
        self.queries = QueryEngine(self.store, placeholder=PLACEHOLDER)
        self.products = ProductService(self.store, InlineImageStorage())
        self._ready = False

    async def handle(self, event: dict) -> dict:
        method = (event.get("httpMethod") or "GET").upper()
        if method == "OPTIONS":
            return _response(200)

        segments = [s for s in (event.get("path") or "").split("/") if s]
        params = event.get("queryStringParameters") or {}

        try:
            if not self._ready:
                await self.store.initialize()
                self._ready = True

            if segments and segments[-1] == "categories" and method == "GET":
                categories = await self.queries.list_categories()
                return _response(200, {
                    "success": True,
                    "categories": [c.model_dump(mode="json") for c in categories],
                })

            if len(segments) >= 2 and segments[-2] == "products" and method == "GET":
                product = await self.queries.get_product(_parse_id(segments[-1]))
                return _response(200, {"success": True, "product": product.model_dump(mode="json")})

            if segments and segments[-1] == "products":
                return await self._products(method, params, event)

        except InventoryError as exc:
            return _response(exc.status_code, {"success": False, "error": exc.message})
        except Exception as exc:
            logger.exception("Serverless request failed")
            return _response(500, {"success": False, "error": str(exc)})

        return _response(404, {"success": False, "error": "Endpoint not found"})

    async def _products(self, method: str, params: dict, event: dict) -> dict:
        if method == "GET":
            query = ProductQuery.parse(
                search=params.get("search"),
                category=params.get("category"),
                page=params.get("page"),
                limit=params.get("limit"),
                sort_by=params.get("sortBy"),
                sort_order=params.get("sortOrder"),
            )
            result = await self.queries.list_products(query)
            return _response(200, {
                "success": True,
                "products": [p.model_dump(mode="json") for p in result.items],
                "pagination": result.pagination.model_dump(by_alias=True),
            })
        if method == "POST":
            product_id = await self.products.create_product(_json_body(event))
            return _response(200, {"success": True, "id": product_id})
        if method == "PUT":
            await self.products.update_product(_json_body(event))
            return _response(200, {"success": True})
        if method == "DELETE":
            await self.products.delete_product(_parse_id(params.get("id")))
            return _response(200, {"success": True})
        return _response(405, {"success": False, "error": f"Method {method} not allowed"})


_app: ServerlessApp | None = None


def handler(event: dict, context=None) -> dict:
    global _app
    if _app is None:
        _app = ServerlessApp(settings.SERVERLESS_DATA_DIR)
    return asyncio.run(_app.handle(event))
