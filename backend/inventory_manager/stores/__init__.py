from inventory_manager.stores.base import RecordStore
from inventory_manager.stores.json_file import JsonFileRecordStore
from inventory_manager.stores.local_storage import LocalStorage, LocalStorageRecordStore
from inventory_manager.stores.sql import SqlRecordStore

__all__ = [
    "RecordStore",
    "JsonFileRecordStore",
    "LocalStorage",
    "LocalStorageRecordStore",
    "SqlRecordStore",
]
