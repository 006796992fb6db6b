"""Django ORM implementations of the catalog repositories.

Products are always read with their category (single JOIN).
"""

from __future__ import annotations

from django.db.models import QuerySet

from modules.catalog.models import Category, Product
from modules.catalog.repositories.interfaces import (
    ICategoryRepository,
    IProductRepository,
)
from modules.core.repositories.django_repository import DjangoRepository


class CategoryDjangoRepository(DjangoRepository[Category], ICategoryRepository):
    model = Category

    def list_ordered(self) -> QuerySet:
        return self._queryset().order_by("display_order", "name")


class ProductDjangoRepository(DjangoRepository[Product], IProductRepository):
    model = Product
    select_related = ("category",)

    def list_by_category(self, category_id: str) -> QuerySet:
        return self.list({"category_id": category_id})
