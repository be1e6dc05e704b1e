"""JSON-file store used by the serverless deployment and by ``USE_MYSQL=false``."""

from pathlib import Path

from inventory_manager.core.errors import MediumCorruptError
from inventory_manager.stores.document import DocumentRecordStore, atomic_write


class JsonFileRecordStore(DocumentRecordStore):
    """``<data_dir>/categories.json`` and ``<data_dir>/products.json``."""

    label = "JSON file"

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _read(self, collection: str) -> str | None:
        path = self.path_for(collection)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise MediumCorruptError(f"{path.name} is not UTF-8 text") from exc

    def _write(self, collection: str, text: str) -> None:
        atomic_write(self.path_for(collection), text)
