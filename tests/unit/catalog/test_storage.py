"""Unit tests for ProductImageStore."""

from __future__ import annotations

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage

from modules.catalog.exceptions import InvalidImagePath
from modules.catalog.storage import ProductImageStore

pytestmark = pytest.mark.unit


@pytest.fixture()
def storage(tmp_path):
    return FileSystemStorage(location=str(tmp_path))


@pytest.fixture()
def store(storage):
    return ProductImageStore(storage=storage, directory="images/product")


class TestEnsureManaged:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("images/product/a.png", "images/product/a.png"),
            ("/images/product/a.png", "images/product/a.png"),
            ("images\\product\\a.png", "images/product/a.png"),
            ("images/product/../product/a.png", "images/product/a.png"),
        ],
    )
    def test_accepts_paths_inside_directory(self, store, name, expected):
        assert store.ensure_managed(name) == expected

    @pytest.mark.parametrize(
        "name",
        [
            "images/product/../../settings.py",
            "images/other/a.png",
            "images/product",
            "a.png",
        ],
    )
    def test_rejects_paths_outside_directory(self, store, name):
        with pytest.raises(InvalidImagePath):
            store.ensure_managed(name)


class TestSaveAndDelete:
    def test_save_uses_uuid_name_and_keeps_extension(self, store, storage):
        name = store.save(ContentFile(b"cover", name="My Cover.PNG"))

        assert name.startswith("images/product/")
        assert name.endswith(".png")
        assert "My Cover" not in name
        assert storage.exists(name)

    def test_delete_removes_file(self, store, storage):
        name = store.save(ContentFile(b"cover", name="cover.jpg"))
        store.delete(name)
        assert not storage.exists(name)

    def test_delete_missing_file_is_noop(self, store):
        store.delete("images/product/missing.jpg")

    def test_delete_outside_directory_raises(self, store, storage):
        storage.save("secret.txt", ContentFile(b"keep me"))
        with pytest.raises(InvalidImagePath):
            store.delete("images/product/../../secret.txt")
        assert storage.exists("secret.txt")
