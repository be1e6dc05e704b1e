"""Unit tests for image storage."""

import base64

import pytest

from inventory_manager.core.errors import (
    NotFoundError, PayloadTooLargeError, UnsupportedMediaError, ValidationError,
)
from inventory_manager.services.images import DiskImageStorage, InlineImageStorage, validate_image


def test_validate_image():
    validate_image("image/jpeg", 10, max_bytes=10)

    with pytest.raises(UnsupportedMediaError):
        validate_image("application/pdf", 10)
    with pytest.raises(UnsupportedMediaError):
        validate_image(None, 10)
    with pytest.raises(PayloadTooLargeError):
        validate_image("image/png", 11, max_bytes=10)


def test_disk_storage_save_and_delete(tmp_path):
    storage = DiskImageStorage(tmp_path / "uploads")

    image_url = storage.save("Photo.PNG", "image/png", b"\x89PNG")

    assert image_url.startswith("/uploads/")
    assert image_url.endswith(".PNG")
    assert storage.manages(image_url)
    assert storage.path_for(image_url).read_bytes() == b"\x89PNG"

    storage.delete(image_url)
    with pytest.raises(NotFoundError):
        storage.delete(image_url)


def test_disk_storage_names_are_unique(tmp_path):
    storage = DiskImageStorage(tmp_path)
    urls = {storage.save("a.jpg", "image/jpeg", b"x") for _ in range(5)}
    assert len(urls) == 5


def test_disk_storage_refuses_paths_outside_root(tmp_path):
    storage = DiskImageStorage(tmp_path / "uploads")
    (tmp_path / "secret.txt").write_text("do not delete")

    with pytest.raises(ValidationError):
        storage.delete("/uploads/../secret.txt")
    with pytest.raises(ValidationError):
        storage.delete("https://cdn.example.com/a.png")

    assert (tmp_path / "secret.txt").exists()


def test_disk_storage_ownership(tmp_path):
    storage = DiskImageStorage(tmp_path)
    assert not storage.manages(None)
    assert not storage.manages("data:image/png;base64,AAAA")
    assert not storage.manages("/uploadsX/a.png")


def test_inline_storage_encodes_data_uri():
    storage = InlineImageStorage()

    image_url = storage.save("a.png", "image/png", b"\x00\x01")

    assert image_url == "data:image/png;base64," + base64.b64encode(b"\x00\x01").decode()
    assert not storage.manages(image_url)
    storage.delete(image_url)
