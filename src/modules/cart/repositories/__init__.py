"""Cart repositories package."""

from modules.cart.repositories.django_repository import ShoppingCartDjangoRepository
from modules.cart.repositories.interfaces import IShoppingCartRepository

__all__ = ["IShoppingCartRepository", "ShoppingCartDjangoRepository"]
