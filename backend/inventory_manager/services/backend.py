"""Wire one Record Store to its Query Engine and Mutation Service."""

from dataclasses import dataclass

from inventory_manager.core.config import Settings
from inventory_manager.db.base import create_engine
from inventory_manager.services.images import DiskImageStorage
from inventory_manager.services.products import ProductService
from inventory_manager.services.query import QueryEngine, SqlQueryEngine
from inventory_manager.stores.base import RecordStore
from inventory_manager.stores.json_file import JsonFileRecordStore
from inventory_manager.stores.sql import SqlRecordStore


@dataclass
class Backend:
    store: RecordStore
    queries: QueryEngine
    products: ProductService
    settings: Settings

    @property
    def config(self) -> dict:
        if not self.settings.USE_MYSQL:
            return {"dataDir": self.settings.DATA_DIR}
        return {
            "host": self.settings.DB_HOST,
            "database": self.settings.DB_NAME,
            "port": self.settings.DB_PORT,
        }


def build_backend(settings: Settings) -> Backend:
    """Relational store when ``USE_MYSQL`` is set, JSON files under ``DATA_DIR`` otherwise."""
    if settings.USE_MYSQL:
        store = SqlRecordStore(create_engine(settings), label=settings.database_label)
        queries = SqlQueryEngine(store, settings.CATEGORY_PLACEHOLDER)
    else:
        store = JsonFileRecordStore(settings.DATA_DIR)
        queries = QueryEngine(store, settings.CATEGORY_PLACEHOLDER)

    products = ProductService(
        store,
        DiskImageStorage(settings.UPLOAD_DIR),
        max_upload_bytes=settings.MAX_FILE_SIZE,
    )
    return Backend(store=store, queries=queries, products=products, settings=settings)
