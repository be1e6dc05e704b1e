"""Tests for the serverless (Netlify-style) handler over JSON files."""

import json

import pytest

from conftest import product_payload
from inventory_manager.serverless import ServerlessApp


@pytest.fixture
def app(tmp_path):
    return ServerlessApp(str(tmp_path))


def _event(method, path, params=None, body=None):
    return {
        "httpMethod": method,
        "path": path,
        "queryStringParameters": params,
        "body": json.dumps(body) if body is not None else None,
    }


@pytest.mark.asyncio
async def test_preflight(app):
    response = await app.handle(_event("OPTIONS", "/.netlify/functions/api/products"))

    assert response["statusCode"] == 200
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"


@pytest.mark.asyncio
async def test_categories(app):
    response = await app.handle(_event("GET", "/.netlify/functions/api/categories"))

    body = json.loads(response["body"])
    assert response["statusCode"] == 200
    assert len(body["categories"]) == 5


@pytest.mark.asyncio
async def test_products_listing_is_paginated(app):
    response = await app.handle(_event("GET", "/api/products", {"search": "robinet"}))

    body = json.loads(response["body"])
    assert [p["name"] for p in body["products"]] == ["Robinet mélangeur"]
    assert body["pagination"]["totalItems"] == 1
    assert body["pagination"]["currentPage"] == 1


@pytest.mark.asyncio
async def test_product_by_id(app):
    found = await app.handle(_event("GET", "/api/products/1"))
    missing = await app.handle(_event("GET", "/api/products/99"))
    invalid = await app.handle(_event("GET", "/api/products/abc"))

    assert json.loads(found["body"])["product"]["name"] == "Marteau 500g"
    assert missing["statusCode"] == 404
    assert invalid["statusCode"] == 400


@pytest.mark.asyncio
async def test_missing_category_uses_french_placeholder(app):
    created = await app.handle(_event("POST", "/api/products", body=product_payload(category_id=None)))
    new_id = json.loads(created["body"])["id"]

    response = await app.handle(_event("GET", f"/api/products/{new_id}"))

    assert json.loads(response["body"])["product"]["category_name"] == "Aucune"


@pytest.mark.asyncio
async def test_create_update_delete(app, tmp_path):
    created = await app.handle(_event("POST", "/api/products", body=product_payload()))
    new_id = json.loads(created["body"])["id"]
    assert new_id == 8

    updated = await app.handle(_event("PUT", "/api/products", body=product_payload(id=new_id, remaining_stock=0)))
    deleted = await app.handle(_event("DELETE", "/api/products", {"id": str(new_id)}))
    again = await app.handle(_event("DELETE", "/api/products", {"id": str(new_id)}))

    assert json.loads(updated["body"]) == {"success": True}
    assert json.loads(deleted["body"]) == {"success": True}
    assert again["statusCode"] == 404
    assert len(json.loads((tmp_path / "products.json").read_text(encoding="utf-8"))) == 7


@pytest.mark.asyncio
async def test_invalid_body(app):
    response = await app.handle({"httpMethod": "POST", "path": "/api/products", "body": "{oops"})

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["success"] is False


@pytest.mark.asyncio
async def test_unknown_endpoint(app):
    response = await app.handle(_event("GET", "/api/orders"))

    assert response["statusCode"] == 404
    assert json.loads(response["body"]) == {"success": False, "error": "Endpoint not found"}


@pytest.mark.asyncio
async def test_deleting_every_product_does_not_restore_defaults(app, tmp_path):
    for product_id in range(1, 8):
        response = await app.handle(_event("DELETE", "/api/products", {"id": str(product_id)}))
        assert response["statusCode"] == 200

    listing = await app.handle(_event("GET", "/api/products"))
    cold_start = await ServerlessApp(str(tmp_path)).handle(_event("GET", "/api/products"))

    assert json.loads(listing["body"])["pagination"]["totalItems"] == 0
    assert json.loads(cold_start["body"])["products"] == []
