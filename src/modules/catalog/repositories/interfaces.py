"""Catalog repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.catalog.models import Category, Product


class ICategoryRepository(IRepository["Category"]):
    @abstractmethod
    def list_ordered(self) -> QuerySet:
        """Categories by display order, then name."""


class IProductRepository(IRepository["Product"]):
    @abstractmethod
    def list_by_category(self, category_id: str) -> QuerySet:
        """Live products of one category."""
