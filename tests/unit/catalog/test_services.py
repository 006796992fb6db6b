"""Unit tests for CategoryService and ProductService.

Covers:
- Category CRUD delegation and not-found handling.
- upsert_product: create, update, unknown category, cover replacement
  order (new file written, row saved, old file removed), rollback of
  the new file when the save fails, invalid stored cover path.
- delete_image / delete_product: file removal after the row change.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, call
from uuid import uuid4

import pytest
from django.core.files.base import ContentFile

from modules.catalog.dtos import CategoryDTO, ProductDTO
from modules.catalog.exceptions import (
    CategoryNotFound,
    InvalidImagePath,
    ProductNotFound,
)
from modules.catalog.models import Category, Product
from modules.catalog.services import CategoryService, ProductService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda entity: entity
    return repo


@pytest.fixture()
def category_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda entity: entity
    return repo


@pytest.fixture()
def image_store():
    store = MagicMock()
    store.save.return_value = "images/product/new.png"
    return store


@pytest.fixture()
def service(product_repo, category_repo, image_store):
    return ProductService(
        repository=product_repo,
        category_repository=category_repo,
        image_store=image_store,
    )


@pytest.fixture()
def scifi():
    return Category(name="SciFi", display_order=2)


def _dto(category_id, **overrides) -> ProductDTO:
    values = {
        "title": "Rock in the Ocean",
        "author": "Ron Parker",
        "isbn": "SOTJ1111111101",
        "list_price": Decimal("30"),
        "price": Decimal("27"),
        "price50": Decimal("25"),
        "price100": Decimal("20"),
        "category_id": category_id,
    }
    values.update(overrides)
    return ProductDTO(**values)


def _existing(image: str = "") -> Product:
    product = Product(title="Old title", author="Old", isbn="OLD")
    product.image.name = image
    return product


# ===========================================================================
# CategoryService
# ===========================================================================


class TestCategoryService:
    def test_create_category(self, category_repo):
        service = CategoryService(repository=category_repo)
        category = service.create_category(CategoryDTO(name="History", display_order=3))
        assert category.name == "History"
        assert category.display_order == 3
        category_repo.save.assert_called_once()

    def test_update_category(self, category_repo, scifi):
        category_repo.get_by_id.return_value = scifi
        service = CategoryService(repository=category_repo)

        updated = service.update_category(
            str(scifi.id), CategoryDTO(name="Science Fiction", display_order=5)
        )

        assert updated.name == "Science Fiction"
        assert updated.display_order == 5

    def test_get_missing_category_raises(self, category_repo):
        category_repo.get_by_id.return_value = None
        with pytest.raises(CategoryNotFound):
            CategoryService(repository=category_repo).get_category(str(uuid4()))

    def test_delete_missing_category_raises(self, category_repo):
        category_repo.delete.return_value = False
        with pytest.raises(CategoryNotFound):
            CategoryService(repository=category_repo).delete_category(str(uuid4()))

    def test_list_is_ordered_by_repository(self, category_repo):
        CategoryService(repository=category_repo).list_categories()
        category_repo.list_ordered.assert_called_once_with()


# ===========================================================================
# upsert_product
# ===========================================================================


class TestUpsertProduct:
    def test_create_without_image(self, service, category_repo, image_store, scifi):
        category_repo.get_by_id.return_value = scifi

        product = service.upsert_product(_dto(scifi.id))

        assert product.title == "Rock in the Ocean"
        assert product.category is scifi
        assert not product.image
        image_store.save.assert_not_called()

    def test_create_with_image(self, service, category_repo, image_store, scifi):
        category_repo.get_by_id.return_value = scifi
        upload = ContentFile(b"png", name="cover.png")

        product = service.upsert_product(_dto(scifi.id), image=upload)

        image_store.save.assert_called_once_with(upload)
        assert product.image.name == "images/product/new.png"
        image_store.delete.assert_not_called()

    def test_unknown_category_raises(self, service, category_repo, product_repo):
        category_repo.get_by_id.return_value = None
        with pytest.raises(CategoryNotFound):
            service.upsert_product(_dto(uuid4()))
        product_repo.save.assert_not_called()

    def test_unknown_product_raises(self, service, product_repo, scifi):
        product_repo.get_by_id.return_value = None
        with pytest.raises(ProductNotFound):
            service.upsert_product(_dto(scifi.id), product_id=str(uuid4()))

    def test_update_keeps_cover_without_new_upload(
        self, service, product_repo, category_repo, image_store, scifi
    ):
        existing = _existing("images/product/old.png")
        product_repo.get_by_id.return_value = existing
        category_repo.get_by_id.return_value = scifi

        product = service.upsert_product(_dto(scifi.id, title="New"), product_id=str(existing.id))

        assert product.title == "New"
        assert product.image.name == "images/product/old.png"
        image_store.delete.assert_not_called()

    def test_replacing_cover_deletes_old_file_after_save(
        self, service, product_repo, category_repo, image_store, scifi
    ):
        existing = _existing("images/product/old.png")
        product_repo.get_by_id.return_value = existing
        category_repo.get_by_id.return_value = scifi
        tracker = MagicMock()
        tracker.attach_mock(image_store.save, "save_image")
        tracker.attach_mock(product_repo.save, "save_product")
        tracker.attach_mock(image_store.delete, "delete_image")

        product = service.upsert_product(
            _dto(scifi.id), image=ContentFile(b"png", name="c.png"), product_id=str(existing.id)
        )

        assert product.image.name == "images/product/new.png"
        assert [c[0] for c in tracker.mock_calls] == ["save_image", "save_product", "delete_image"]
        assert tracker.mock_calls[-1] == call.delete_image("images/product/old.png")

    def test_failed_save_removes_new_file_and_keeps_old(
        self, service, product_repo, category_repo, image_store, scifi
    ):
        existing = _existing("images/product/old.png")
        product_repo.get_by_id.return_value = existing
        category_repo.get_by_id.return_value = scifi
        product_repo.save.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            service.upsert_product(
                _dto(scifi.id), image=ContentFile(b"png", name="c.png"), product_id=str(existing.id)
            )

        image_store.delete.assert_called_once_with("images/product/new.png")

    def test_invalid_stored_cover_aborts_before_writing(
        self, service, product_repo, category_repo, image_store, scifi
    ):
        existing = _existing("../../etc/passwd")
        product_repo.get_by_id.return_value = existing
        category_repo.get_by_id.return_value = scifi
        image_store.ensure_managed.side_effect = InvalidImagePath("bad path")

        with pytest.raises(InvalidImagePath):
            service.upsert_product(
                _dto(scifi.id), image=ContentFile(b"png", name="c.png"), product_id=str(existing.id)
            )

        image_store.save.assert_not_called()
        product_repo.save.assert_not_called()


# ===========================================================================
# delete_image / delete_product
# ===========================================================================


class TestDeleteProduct:
    def test_delete_image_clears_field_and_file(self, service, product_repo, image_store):
        existing = _existing("images/product/old.png")
        product_repo.get_by_id.return_value = existing

        product = service.delete_image(str(existing.id))

        assert not product.image
        product_repo.save.assert_called_once_with(existing)
        image_store.delete.assert_called_once_with("images/product/old.png")

    def test_delete_image_without_cover_is_noop(self, service, product_repo, image_store):
        product_repo.get_by_id.return_value = _existing()
        service.delete_image("any")
        product_repo.save.assert_not_called()
        image_store.delete.assert_not_called()

    def test_delete_product_soft_deletes_then_removes_cover(
        self, service, product_repo, image_store
    ):
        existing = _existing("images/product/old.png")
        product_repo.get_by_id.return_value = existing

        service.delete_product(str(existing.id))

        product_repo.delete.assert_called_once_with(str(existing.id))
        image_store.delete.assert_called_once_with("images/product/old.png")

    def test_delete_missing_product_raises(self, service, product_repo):
        product_repo.get_by_id.return_value = None
        with pytest.raises(ProductNotFound):
            service.delete_product(str(uuid4()))
