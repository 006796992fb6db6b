"""Unit tests for BaseModel and SoftDeleteModel.

Exercised through the catalog models: ``Category`` is soft-deletable,
``ShoppingCart`` is a plain ``BaseModel``.
"""

from __future__ import annotations

import uuid

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.cart.models import ShoppingCart
from modules.catalog.models import Category
from modules.core.models import SoftDeleteManager, SoftDeleteQuerySet

pytestmark = pytest.mark.unit


def _category(name="Action", display_order=1) -> Category:
    return Category.objects.create(name=name, display_order=display_order)


# ==== BaseModel


class TestBaseModel:
    def test_id_is_uuid_version_7(self):
        category = _category()
        assert isinstance(category.id, uuid.UUID)
        assert category.id.version == 7

    def test_ids_are_time_ordered(self):
        first = _category("First", 1)
        second = _category("Second", 2)
        assert str(first.id) < str(second.id)

    def test_timestamps_set_on_create(self):
        category = _category()
        assert category.created_at is not None
        assert category.updated_at is not None

    def test_save_with_update_fields_refreshes_updated_at(self, customer, product):
        line = ShoppingCart.objects.create(user=customer, product=product, count=1)
        before = line.updated_at
        line.count = 3
        line.save(update_fields=["count"])
        line.refresh_from_db()
        assert line.count == 3
        assert line.updated_at > before

    def test_id_is_not_editable(self):
        assert Category._meta.get_field("id").editable is False


# ==== SoftDeleteModel


class TestSoftDeleteModel:
    def test_new_instance_is_not_deleted(self):
        category = _category()
        assert category.is_deleted is False
        assert category.deleted_at is None

    def test_delete_sets_deleted_at(self):
        category = _category()
        result = category.delete()
        category.refresh_from_db()
        assert category.is_deleted is True
        assert result == (1, {"catalog.Category": 1})

    def test_delete_is_noop_if_already_deleted(self):
        category = _category()
        category.delete()
        assert category.delete() == (0, {})

    def test_soft_deleted_row_stays_in_objects(self):
        category = _category()
        category.delete()
        assert Category.objects.filter(pk=category.pk).exists()
        assert not Category.objects.alive().filter(pk=category.pk).exists()

    @freeze_time("2026-03-01 09:30:00")
    def test_delete_records_exact_timestamp(self):
        category = _category()
        category.delete()
        category.refresh_from_db()
        assert category.deleted_at == timezone.now()


class TestSoftDeleteQuerySet:
    def test_bulk_delete_skips_already_deleted(self):
        first = _category("A", 1)
        second = _category("B", 2)
        first.delete()
        count, _ = Category.objects.filter(pk__in=[first.pk, second.pk]).delete()
        assert count == 1
        second.refresh_from_db()
        assert second.is_deleted is True

    def test_manager_and_queryset_types(self):
        assert isinstance(Category.objects, SoftDeleteManager)
        assert isinstance(Category.objects.all(), SoftDeleteQuerySet)
