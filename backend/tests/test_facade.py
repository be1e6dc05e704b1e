"""Unit tests for the Data Access Facade and its two backends."""

from unittest.mock import MagicMock

import httpx
import pytest

from conftest import product_payload
from inventory_manager.client import DataAccessFacade, NetworkApi, OfflineApi, Outcome
from inventory_manager.core.errors import MediumCorruptError
from inventory_manager.stores.local_storage import LocalStorage


def _network(handler) -> NetworkApi:
    return NetworkApi("http://inventory.test/api", transport=httpx.MockTransport(handler))


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def _answer(status_code: int, payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)
    return handler


# ── NetworkApi classification ──

@pytest.mark.asyncio
async def test_network_classifies_outcomes():
    ok = await _network(_answer(200, {"success": True, "categories": []})).get_categories()
    app_error = await _network(_answer(404, {"success": False, "error": "Product not found"})).get_product_by_id(9)
    down = await _network(_unreachable).get_categories()
    gateway = await _network(_answer(503, {"success": False, "error": "db"})).get_categories()
    shapeless = await _network(_answer(200, {"categories": []})).get_categories()

    assert ok.outcome is Outcome.OK
    assert app_error.outcome is Outcome.APPLICATION_ERROR
    assert app_error.error == "Product not found"
    assert down.is_transport_failure
    assert gateway.is_transport_failure
    assert shapeless.is_transport_failure


@pytest.mark.asyncio
async def test_network_rejects_non_json_body():
    def handler(request):
        return httpx.Response(200, text="<html>Bad gateway</html>")

    result = await _network(handler).get_categories()
    assert result.is_transport_failure


@pytest.mark.asyncio
async def test_network_sends_listing_parameters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True, "products": [], "pagination": {}})

    await _network(handler).get_products(search="vis", category="2", page=3, limit=10, sort_by="name", sort_order="ASC")

    assert seen["path"] == "/api/products"
    assert seen["params"] == {
        "search": "vis", "category": "2", "page": "3", "limit": "10", "sortBy": "name", "sortOrder": "ASC",
    }


@pytest.mark.asyncio
async def test_network_delete_product_uses_query_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["id"] = request.url.params.get("id")
        return httpx.Response(200, json={"success": True})

    await _network(handler).delete_product(7)
    assert seen == {"method": "DELETE", "id": "7"}


# ── Fail-over ──

@pytest.mark.asyncio
async def test_transport_failure_falls_back_to_offline():
    on_fallback = MagicMock()
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage()), on_fallback=on_fallback)

    result = await facade.get_categories()

    assert result["success"] is True
    assert len(result["categories"]) == 5
    assert facade.degraded is True
    on_fallback.assert_called_once_with("categories")


@pytest.mark.asyncio
async def test_application_error_is_not_retried_offline():
    storage = LocalStorage()
    facade = DataAccessFacade(
        _network(_answer(400, {"success": False, "error": "Invalid product ID"})),
        OfflineApi(storage),
    )

    result = await facade.delete_product(3)

    assert result == {"success": False, "error": "Invalid product ID"}
    assert facade.degraded is False
    assert len(storage) == 0  # offline store never touched


@pytest.mark.asyncio
async def test_server_unavailable_status_falls_back():
    facade = DataAccessFacade(
        _network(_answer(503, {"success": False, "error": "Database unavailable"})),
        OfflineApi(LocalStorage()),
    )

    result = await facade.get_products(search="robinet")

    assert [p["name"] for p in result["products"]] == ["Robinet mélangeur"]
    assert facade.degraded is True


@pytest.mark.asyncio
async def test_offline_listing_is_shaped_as_single_page():
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage()))

    result = await facade.get_products(category="1", page=2, limit=20)

    assert result["success"] is True
    assert len(result["products"]) == 2
    assert result["pagination"] == {
        "currentPage": 2,
        "totalPages": 1,
        "totalItems": 2,
        "itemsPerPage": 20,
        "hasNextPage": False,
        "hasPrevPage": False,
    }
    assert all(p["category_name"] == "Outils" for p in result["products"])


@pytest.mark.asyncio
async def test_offline_listing_reports_bad_filter():
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage()))

    result = await facade.get_products(category="tools")

    assert result["success"] is False
    assert "category" in result["error"]


@pytest.mark.asyncio
async def test_product_by_id_has_no_offline_fallback():
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage()))

    result = await facade.get_product_by_id(1)

    assert result == {"success": False, "error": "Backend unavailable"}


@pytest.mark.asyncio
async def test_each_call_probes_the_network_again():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if len(calls) == 1:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, json={"success": True, "categories": [{"id": 1, "name": "Outils"}]})

    facade = DataAccessFacade(_network(handler), OfflineApi(LocalStorage()))

    offline = await facade.get_categories()
    assert facade.degraded is True
    online = await facade.get_categories()

    assert len(offline["categories"]) == 5
    assert online["categories"] == [{"id": 1, "name": "Outils"}]
    assert facade.degraded is False
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_offline_mutations_round_trip():
    offline = OfflineApi(LocalStorage())
    facade = DataAccessFacade(_network(_unreachable), offline)

    created = await facade.create_product(product_payload())
    assert created == {"success": True, "id": 8}

    updated = await facade.update_product(product_payload(id=8, remaining_stock=1))
    assert updated == {"success": True}

    missing = await facade.update_product(product_payload(id=99))
    assert missing == {"success": False, "error": "Product not found"}

    invalid = await facade.create_product(product_payload(selling_price=-5))
    assert invalid["success"] is False

    assert await facade.delete_product(8) == {"success": True}
    assert await facade.delete_product(8) == {"success": False, "error": "Product not found"}


@pytest.mark.asyncio
async def test_offline_image_upload_inlines_bytes():
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage()))

    uploaded = await facade.upload_image("a.png", "image/png", b"\x89PNG")
    rejected = await facade.upload_image("a.txt", "text/plain", b"hi")

    assert uploaded["success"] is True
    assert uploaded["imageUrl"].startswith("data:image/png;base64,")
    assert rejected == {"success": False, "error": "Only image files are allowed!"}
    assert await facade.delete_image(uploaded["imageUrl"]) == {"success": True}


@pytest.mark.asyncio
async def test_offline_state_survives_restart(tmp_path):
    path = tmp_path / "offline.json"
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage(path)))
    await facade.create_product(product_payload(name="Niveau à bulle"))

    reopened = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage(path)))
    result = await reopened.get_products(search="niveau")

    assert [p["name"] for p in result["products"]] == ["Niveau à bulle"]


@pytest.mark.asyncio
async def test_facade_context_manager_closes_client():
    facade = DataAccessFacade(_network(_unreachable), OfflineApi(LocalStorage()))
    async with facade:
        pass
    assert facade.network.client.is_closed


# ── Offline backup / restore ──

def test_offline_export_import_reset():
    offline = OfflineApi(LocalStorage())
    exported = offline.export_data()
    assert len(exported["products"]) == 7
    assert "exportDate" in exported

    offline.import_data({"categories": exported["categories"], "products": []})
    assert offline.export_data()["products"] == []

    offline.reset_data()
    assert len(offline.export_data()["products"]) == 7


def test_offline_import_rejects_malformed_data():
    offline = OfflineApi(LocalStorage())

    with pytest.raises(MediumCorruptError):
        offline.import_data({"categories": "oops", "products": []})

    assert len(offline.export_data()["categories"]) == 5
