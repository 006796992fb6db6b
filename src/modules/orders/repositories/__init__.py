"""Order repositories package."""

from modules.orders.repositories.django_repository import (
    OrderDetailDjangoRepository,
    OrderHeaderDjangoRepository,
)
from modules.orders.repositories.interfaces import (
    IOrderDetailRepository,
    IOrderHeaderRepository,
)

__all__ = [
    "IOrderDetailRepository",
    "IOrderHeaderRepository",
    "OrderDetailDjangoRepository",
    "OrderHeaderDjangoRepository",
]
