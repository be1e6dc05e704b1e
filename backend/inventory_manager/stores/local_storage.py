"""Offline store over a browser-style key/value storage.

``LocalStorage`` mirrors the Web Storage API: string keys, string values,
whole-key writes. It lives in memory and, when given a path, is mirrored to a
JSON object on disk after every write.
"""

import json
import logging
from pathlib import Path

from inventory_manager.stores.document import DocumentRecordStore, atomic_write

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "droguerie"


class LocalStorage:
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._items: dict[str, str] = self._read_file()

    def _read_file(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            logger.error("Unreadable local storage file %s, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Local storage file %s is not a key/value object, starting empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if self.path is not None:
            atomic_write(self.path, json.dumps(self._items, ensure_ascii=False))

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class LocalStorageRecordStore(DocumentRecordStore):
    """Keys ``droguerie_categories`` and ``droguerie_products``; ``droguerie_settings`` is reserved."""

    label = "local storage"

    def __init__(self, storage: LocalStorage, prefix: str = STORAGE_PREFIX):
        self.storage = storage
        self.prefix = prefix

    @property
    def settings_key(self) -> str:
        return f"{self.prefix}_settings"

    def key_for(self, collection: str) -> str:
        return f"{self.prefix}_{collection}"

    def _read(self, collection: str) -> str | None:
        return self.storage.get_item(self.key_for(collection))

    def _write(self, collection: str, text: str) -> None:
        self.storage.set_item(self.key_for(collection), text)
