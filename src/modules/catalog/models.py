"""Catalog models: Category and Product.

Business rules implemented:
- Category ``display_order`` stays within 1..100.
- Product prices (list, 1-50, 51-100, 100+) stay within 1..1000.
- ``Product.price_for_quantity`` picks the unit price tier for a count.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.catalog.constants import (
    CATEGORY_NAME_MAX_LENGTH,
    DISPLAY_ORDER_MAX,
    DISPLAY_ORDER_MIN,
    PRICE_MAX,
    PRICE_MIN,
    TIER_1_MAX_QUANTITY,
    TIER_2_MAX_QUANTITY,
)
from modules.core.models import SoftDeleteModel

PRICE_VALIDATORS = [MinValueValidator(PRICE_MIN), MaxValueValidator(PRICE_MAX)]


class Category(SoftDeleteModel):
    name = models.CharField(max_length=CATEGORY_NAME_MAX_LENGTH)
    display_order = models.PositiveSmallIntegerField(
        validators=[
            MinValueValidator(DISPLAY_ORDER_MIN),
            MaxValueValidator(DISPLAY_ORDER_MAX),
        ],
    )

    class Meta:
        db_table = "categories"
        ordering = ["display_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Product(SoftDeleteModel):
    """A book in the catalog.

    ``image`` holds the storage name of the cover (``images/product/<uuid>.<ext>``);
    it is written and replaced by ``ProductImageStore`` only.
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    isbn = models.CharField(max_length=20)
    author = models.CharField(max_length=255)
    list_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=PRICE_VALIDATORS
    )
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=PRICE_VALIDATORS
    )
    price50 = models.DecimalField(
        max_digits=10, decimal_places=2, validators=PRICE_VALIDATORS
    )
    price100 = models.DecimalField(
        max_digits=10, decimal_places=2, validators=PRICE_VALIDATORS
    )
    category = models.ForeignKey(
        "catalog.Category",
        on_delete=models.PROTECT,
        related_name="products",
    )
    image = models.FileField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "products"
        ordering = ["title"]
        indexes = [
            models.Index(fields=["isbn"], name="products_isbn_idx"),
        ]

    def price_for_quantity(self, count: int) -> Decimal:
        """Unit price for buying *count* copies."""
        if count <= TIER_1_MAX_QUANTITY:
            return self.price
        if count <= TIER_2_MAX_QUANTITY:
            return self.price50
        return self.price100

    @property
    def image_url(self) -> str:
        return self.image.url if self.image else ""

    def __str__(self) -> str:
        return f"{self.title} ({self.author})"
