"""Unit tests for the Mutation Service."""

import logging
from unittest.mock import MagicMock

import pytest

from conftest import T0, product_payload
from inventory_manager.core.errors import (
    NotFoundError, PayloadTooLargeError, UnsupportedMediaError, ValidationError,
)
from inventory_manager.db.base import create_engine
from inventory_manager.services.images import DiskImageStorage, InlineImageStorage
from inventory_manager.services.products import ProductService, stock_movement
from inventory_manager.stores.sql import SqlRecordStore


@pytest.fixture
def service(local_store, clock):
    return ProductService(local_store, InlineImageStorage(), clock=clock)


@pytest.mark.asyncio
async def test_create_product_assigns_next_id(service):
    new_id = await service.create_product(product_payload())

    stored = await service.store.get_product(new_id)
    assert new_id == 8
    assert stored.name == "Clé à molette"
    assert stored.created_at == stored.updated_at == T0.replace(minute=1)


@pytest.mark.asyncio
async def test_create_product_applies_defaults(service):
    new_id = await service.create_product(
        product_payload(min_stock_level=None, remaining_stock=None, image_url="")
    )

    stored = await service.store.get_product(new_id)
    assert stored.min_stock_level == 10
    assert stored.remaining_stock == 0
    assert stored.image_url is None


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides, field", [
    ({"name": None}, "name"),
    ({"name": "   "}, "name"),
    ({"purchase_price": -1}, "purchase_price"),
    ({"selling_price": "cheap"}, "selling_price"),
])
async def test_create_product_rejects_invalid_fields(service, overrides, field):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_product(product_payload(**overrides))

    assert field in exc_info.value.message
    assert len(await service.store.list_products()) == 7


@pytest.mark.asyncio
async def test_create_product_rejects_missing_price(service):
    data = product_payload()
    del data["selling_price"]

    with pytest.raises(ValidationError):
        await service.create_product(data)


@pytest.mark.asyncio
async def test_create_product_rejects_non_object(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_product(["not", "an", "object"])
    assert exc_info.value.message == "Request body must be a JSON object"


@pytest.mark.asyncio
async def test_create_product_rejects_unknown_category(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_product(product_payload(category_id=42))
    assert "Unknown category" in exc_info.value.message


@pytest.mark.asyncio
async def test_negative_stock_is_accepted_with_warning(service, caplog):
    with caplog.at_level(logging.WARNING):
        new_id = await service.create_product(product_payload(remaining_stock=-3))

    assert (await service.store.get_product(new_id)).remaining_stock == -3
    assert "negative stock" in caplog.text


@pytest.mark.asyncio
async def test_update_round_trip_keeps_created_at(service):
    new_id = await service.create_product(product_payload())

    updated = await service.update_product(
        product_payload(id=new_id, name="Clé à molette 300mm", remaining_stock=9)
    )
    stored = await service.store.get_product(new_id)

    assert stored.name == "Clé à molette 300mm"
    assert stored.remaining_stock == 9
    assert stored.created_at == T0.replace(minute=1)
    assert stored.updated_at == T0.replace(minute=2)
    assert stored.updated_at > stored.created_at
    assert updated.updated_at == stored.updated_at


@pytest.mark.asyncio
async def test_update_missing_product(service):
    with pytest.raises(NotFoundError) as exc_info:
        await service.update_product(product_payload(id=999))
    assert exc_info.value.message == "Product not found"


@pytest.mark.asyncio
async def test_update_requires_id(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.update_product(product_payload())
    assert "id" in exc_info.value.message


@pytest.mark.asyncio
async def test_delete_missing_product(service):
    with pytest.raises(NotFoundError):
        await service.delete_product(999)


@pytest.mark.asyncio
async def test_delete_with_missing_image_reports_warning(json_store, tmp_path, caplog):
    """A vanished image file does not block the delete."""
    service = ProductService(json_store, DiskImageStorage(tmp_path / "uploads"))
    new_id = await service.create_product(product_payload(image_url="/uploads/abc.png"))

    with caplog.at_level(logging.WARNING):
        result = await service.delete_product(new_id)

    assert await json_store.get_product(new_id) is None
    assert len(result.warnings) == 1
    assert "Image cleanup failed" in result.warnings[0]
    record = next(r for r in caplog.records if r.msg.startswith("Could not remove image"))
    assert record.args[0] == new_id


@pytest.mark.asyncio
async def test_delete_removes_uploaded_image(json_store, tmp_path):
    images = DiskImageStorage(tmp_path / "uploads")
    service = ProductService(json_store, images)
    image_url = await service.upload_image("photo.png", "image/png", b"\x89PNG")
    new_id = await service.create_product(product_payload(image_url=image_url))

    result = await service.delete_product(new_id)

    assert result.warnings == []
    assert not images.path_for(image_url).exists()


@pytest.mark.asyncio
async def test_delete_ignores_foreign_image_urls(local_store):
    images = MagicMock(spec=DiskImageStorage)
    images.manages.return_value = False
    service = ProductService(local_store, images)

    await service.delete_product(1)

    images.delete.assert_not_called()


@pytest.mark.asyncio
async def test_upload_image_validation(service):
    with pytest.raises(UnsupportedMediaError) as exc_info:
        await service.upload_image("notes.txt", "text/plain", b"hello")
    assert exc_info.value.message == "Only image files are allowed!"

    service.max_upload_bytes = 3
    with pytest.raises(PayloadTooLargeError):
        await service.upload_image("photo.png", "image/png", b"\x89PNG")


@pytest.mark.asyncio
async def test_delete_image_without_url_is_noop(service):
    await service.delete_image(None)
    await service.delete_image("")


def test_stock_movement_direction():
    assert stock_movement(5, 5, "x") is None
    assert (stock_movement(5, 8, "x").movement_type, stock_movement(5, 8, "x").quantity) == ("IN", 3)
    assert (stock_movement(5, 2, "x").movement_type, stock_movement(5, 2, "x").quantity) == ("OUT", 3)


@pytest.mark.asyncio
async def test_sql_records_stock_movements(sqlite_settings, tmp_path):
    store = SqlRecordStore(create_engine(sqlite_settings))
    service = ProductService(store, DiskImageStorage(tmp_path / "uploads"))
    try:
        await store.initialize()
        outils = next(c for c in await store.list_categories() if c.name == "Outils")

        new_id = await service.create_product(product_payload(category_id=outils.id, remaining_stock=5))
        await service.update_product(product_payload(id=new_id, category_id=outils.id, remaining_stock=2))

        movements = await store.list_movements(new_id)
        assert [(m.movement_type.value, m.quantity) for m in movements] == [("IN", 5), ("OUT", 3)]

        stored = await store.get_product(new_id)
        assert stored.purchase_price == 12.5
        assert stored.remaining_stock == 2
    finally:
        await store.close()
