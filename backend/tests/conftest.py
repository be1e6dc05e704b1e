"""Shared fixtures: throwaway stores over temp directories and in-memory storage."""

from datetime import datetime, timezone

import pytest

from inventory_manager.core.config import Settings
from inventory_manager.stores.json_file import JsonFileRecordStore
from inventory_manager.stores.local_storage import LocalStorage, LocalStorageRecordStore

T0 = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def json_store(tmp_path):
    return JsonFileRecordStore(tmp_path / "data")


@pytest.fixture
def local_store():
    return LocalStorageRecordStore(LocalStorage())


@pytest.fixture
def sqlite_settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        USE_MYSQL=True,
    )


@pytest.fixture
def clock():
    """Clock that moves one minute forward on every reading."""
    ticks = []

    def now() -> datetime:
        ticks.append(None)
        return T0.replace(minute=len(ticks))

    return now


def product_payload(**overrides) -> dict:
    data = {
        "name": "Clé à molette",
        "description": "Clé à molette 250mm",
        "category_id": 1,
        "purchase_price": 12.5,
        "selling_price": 19.9,
        "remaining_stock": 4,
        "min_stock_level": 2,
        "image_url": None,
    }
    data.update(overrides)
    return data
