"""Image storage for product pictures.

The networked backend writes files under an uploads root and hands out
``/uploads/<token><ext>`` paths. The offline backend has no file system to
share with a server, so it inlines the bytes as a base64 data URI inside the
product record. The two encodings render the same image but are not
interchangeable as stored values.
"""

import abc
import base64
import logging
import uuid
from pathlib import Path, PurePosixPath

from inventory_manager.core.errors import (
    NotFoundError, PayloadTooLargeError, UnsupportedMediaError, ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5_000_000


def validate_image(content_type: str | None, size: int, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
    if not content_type or not content_type.lower().startswith("image/"):
        raise UnsupportedMediaError("Only image files are allowed!")
    if size > max_bytes:
        raise PayloadTooLargeError(f"File too large. Max {max_bytes} bytes")


class ImageStorage(abc.ABC):

    @abc.abstractmethod
    def save(self, filename: str | None, content_type: str, content: bytes) -> str:
        """Persist the bytes and return the value to store in ``image_url``."""

    @abc.abstractmethod
    def delete(self, image_url: str) -> None:
        """Remove the stored image. Raises ``NotFoundError`` when it is already gone."""

    def manages(self, image_url: str | None) -> bool:
        """Whether ``image_url`` points at something this storage owns."""
        return False


class DiskImageStorage(ImageStorage):
    def __init__(self, root: str | Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def save(self, filename: str | None, content_type: str, content: bytes) -> str:
        ext = PurePosixPath(filename or "").suffix
        name = f"{uuid.uuid4().hex}{ext}"
        (self.root / name).write_bytes(content)
        logger.info("Stored upload %s (%d bytes, %s)", name, len(content), content_type)
        return f"{self.url_prefix}/{name}"

    def manages(self, image_url: str | None) -> bool:
        return bool(image_url) and image_url.startswith(self.url_prefix + "/")

    def path_for(self, image_url: str) -> Path:
        """Map an ``/uploads/...`` url to a file under the root, refusing anything outside it."""
        if not self.manages(image_url):
            raise ValidationError(f"Not an uploaded image: {image_url}")
        relative = image_url[len(self.url_prefix) + 1:]
        path = (self.root / relative).resolve()
        if not path.is_relative_to(self.root.resolve()) or path == self.root.resolve():
            raise ValidationError(f"Not an uploaded image: {image_url}")
        return path

    def delete(self, image_url: str) -> None:
        path = self.path_for(image_url)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(f"Image not found: {image_url}") from exc
        logger.info("Deleted upload %s", path.name)


class InlineImageStorage(ImageStorage):
    def save(self, filename: str | None, content_type: str, content: bytes) -> str:
        encoded = base64.b64encode(content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

    def delete(self, image_url: str) -> None:
        # Bytes live inside the product record and go away with it.
        pass
