"""Shopping cart repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.cart.models import ShoppingCart


class IShoppingCartRepository(IRepository["ShoppingCart"]):
    @abstractmethod
    def for_user(self, user_id: Any) -> QuerySet:
        """The user's cart lines with their products."""

    @abstractmethod
    def get_for_user(self, id: Any, user_id: Any) -> Optional[ShoppingCart]:
        """A cart line, only if it belongs to *user_id*."""

    @abstractmethod
    def get_line(self, user_id: Any, product_id: Any) -> Optional[ShoppingCart]:
        """The user's line for *product_id*, if any."""

    @abstractmethod
    def increment_count(self, cart: ShoppingCart, delta: int) -> ShoppingCart:
        """Add *delta* (may be negative) to the line's count."""

    @abstractmethod
    def clear_for_user(self, user_id: Any) -> int:
        """Delete every line of the user's cart."""
