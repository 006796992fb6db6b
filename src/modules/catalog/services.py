"""Catalog service layer (Use Cases).

Business rules implemented:
- Categories and products are soft-deleted.
- A product upsert writes the new cover first, persists the product, and
  only then removes the previous cover.  A previous cover outside the
  product image directory aborts the upsert before anything is written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.catalog.exceptions import CategoryNotFound, ProductNotFound
from modules.catalog.models import Category, Product

if TYPE_CHECKING:
    from django.core.files.base import File
    from django.db.models import QuerySet

    from modules.catalog.dtos import CategoryDTO, ProductDTO
    from modules.catalog.repositories.interfaces import (
        ICategoryRepository,
        IProductRepository,
    )
    from modules.catalog.storage import ProductImageStore

logger = structlog.get_logger(__name__)


class CategoryService:
    def __init__(self, repository: ICategoryRepository) -> None:
        self._repo = repository

    def list_categories(self) -> QuerySet:
        return self._repo.list_ordered()

    def get_category(self, id: str) -> Category:
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")
        return category

    @transaction.atomic
    def create_category(self, dto: CategoryDTO) -> Category:
        category = self._repo.save(Category(**dto.model_dump()))
        logger.info("category.created", category_id=str(category.id))
        return category

    @transaction.atomic
    def update_category(self, id: str, dto: CategoryDTO) -> Category:
        """Raises:
        CategoryNotFound: if the category does not exist.
        """
        category = self.get_category(id)
        category.name = dto.name
        category.display_order = dto.display_order
        category = self._repo.save(category)
        logger.info("category.updated", category_id=str(id))
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> None:
        if not self._repo.delete(id):
            raise CategoryNotFound(f"Category {id} not found.")
        logger.info("category.soft_deleted", category_id=str(id))


class ProductService:
    """Application service for Product use-cases.

    Receives the product and category repositories and the image store
    via constructor injection.
    """

    def __init__(
        self,
        repository: IProductRepository,
        category_repository: ICategoryRepository,
        image_store: ProductImageStore,
    ) -> None:
        self._repo = repository
        self._categories = category_repository
        self._images = image_store

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def upsert_product(
        self,
        dto: ProductDTO,
        image: Optional[File] = None,
        product_id: Optional[str] = None,
    ) -> Product:
        """Create a product, or update ``product_id`` when given.

        Raises:
            ProductNotFound: ``product_id`` does not exist.
            CategoryNotFound: ``dto.category_id`` does not exist.
            InvalidImagePath: the current cover lies outside the image directory.
        """
        if product_id is not None:
            product = self.get_product(product_id)
        else:
            product = Product()

        category = self._categories.get_by_id(dto.category_id)
        if not category:
            raise CategoryNotFound(f"Category {dto.category_id} not found.")

        old_image = product.image.name if product.image else ""
        if image is not None and old_image:
            self._images.ensure_managed(old_image)

        for field, value in dto.model_dump(exclude={"category_id"}).items():
            setattr(product, field, value)
        product.category = category

        new_image = self._images.save(image) if image is not None else None
        if new_image is not None:
            product.image.name = new_image

        try:
            with transaction.atomic():
                product = self._repo.save(product)
        except Exception:
            if new_image is not None:
                self._images.delete(new_image)
            raise

        if new_image is not None and old_image:
            self._images.delete(old_image)

        logger.info(
            "product.upserted",
            product_id=str(product.id),
            created=product_id is None,
            image_replaced=new_image is not None,
        )
        return product

    def delete_image(self, id: str) -> Product:
        """Remove the cover of a product, keeping the product."""
        product = self.get_product(id)
        old_image = product.image.name if product.image else ""
        if not old_image:
            return product

        self._images.ensure_managed(old_image)
        product.image.name = ""
        with transaction.atomic():
            product = self._repo.save(product)
        self._images.delete(old_image)
        logger.info("product.image_deleted", product_id=str(id))
        return product

    def delete_product(self, id: str) -> None:
        """Soft-delete a product and remove its cover file.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self.get_product(id)
        image = product.image.name if product.image else ""
        if image:
            self._images.ensure_managed(image)
        with transaction.atomic():
            self._repo.delete(id)
        if image:
            self._images.delete(image)
        logger.info("product.soft_deleted", product_id=str(id))
