"""Django ORM implementation of the shopping cart repository."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from modules.cart.models import ShoppingCart
from modules.cart.repositories.interfaces import IShoppingCartRepository
from modules.core.repositories.django_repository import DjangoRepository

logger = structlog.get_logger(__name__)


class ShoppingCartDjangoRepository(DjangoRepository[ShoppingCart], IShoppingCartRepository):
    model = ShoppingCart
    select_related = ("product", "product__category")

    def for_user(self, user_id: Any) -> QuerySet:
        return self.list({"user_id": user_id})

    def get_for_user(self, id: Any, user_id: Any) -> Optional[ShoppingCart]:
        return self.get(pk=id, user_id=user_id)

    def get_line(self, user_id: Any, product_id: Any) -> Optional[ShoppingCart]:
        return self.get(user_id=user_id, product_id=product_id)

    @transaction.atomic
    def increment_count(self, cart: ShoppingCart, delta: int) -> ShoppingCart:
        """Atomic ``count = count + delta`` in the database."""
        ShoppingCart.objects.filter(pk=cart.pk).update(
            count=F("count") + delta, updated_at=timezone.now()
        )
        cart.refresh_from_db(fields=["count"])
        logger.info("shoppingcart.count_changed", cart_id=str(cart.pk), count=cart.count)
        return cart

    @transaction.atomic
    def clear_for_user(self, user_id: Any) -> int:
        count, _ = ShoppingCart.objects.filter(user_id=user_id).delete()
        logger.info("shoppingcart.cleared", user_id=str(user_id), count=count)
        return count
