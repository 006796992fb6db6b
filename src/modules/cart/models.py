"""Shopping cart line items.

A line is unique per (user, product); adding the same product again
increases ``count``.  Lines are deleted on removal and when the order
they became is confirmed.
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class ShoppingCart(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.CASCADE,
        related_name="cart_items",
    )
    count = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    class Meta:
        db_table = "shopping_carts"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"], name="shopping_carts_user_product_uniq"
            ),
            models.CheckConstraint(
                condition=models.Q(count__gte=1),
                name="shopping_carts_count_positive",
            ),
        ]

    @property
    def price(self):
        """Unit price of the product's tier for this line's count."""
        return self.product.price_for_quantity(self.count)

    @property
    def subtotal(self):
        return self.price * self.count

    def __str__(self) -> str:
        return f"{self.product} x{self.count}"
