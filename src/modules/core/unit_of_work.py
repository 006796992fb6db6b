"""Unit of Work: one transaction shared by every repository.

Services that touch more than one aggregate (checkout, order lifecycle,
role management) receive an ``IUnitOfWork`` instead of individual
repositories and wrap their mutations in ``with uow.atomic():``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import IApplicationUserRepository
    from modules.cart.repositories.interfaces import IShoppingCartRepository
    from modules.catalog.repositories.interfaces import (
        ICategoryRepository,
        IProductRepository,
    )
    from modules.companies.repositories.interfaces import ICompanyRepository
    from modules.orders.repositories.interfaces import (
        IOrderDetailRepository,
        IOrderHeaderRepository,
    )


class IUnitOfWork(ABC):
    categories: ICategoryRepository
    products: IProductRepository
    companies: ICompanyRepository
    users: IApplicationUserRepository
    shopping_carts: IShoppingCartRepository
    order_headers: IOrderHeaderRepository
    order_details: IOrderDetailRepository

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Context manager delimiting one database transaction."""


class DjangoUnitOfWork(IUnitOfWork):
    def __init__(self) -> None:
        from modules.accounts.repositories.django_repository import (
            ApplicationUserDjangoRepository,
        )
        from modules.cart.repositories.django_repository import (
            ShoppingCartDjangoRepository,
        )
        from modules.catalog.repositories.django_repository import (
            CategoryDjangoRepository,
            ProductDjangoRepository,
        )
        from modules.companies.repositories.django_repository import (
            CompanyDjangoRepository,
        )
        from modules.orders.repositories.django_repository import (
            OrderDetailDjangoRepository,
            OrderHeaderDjangoRepository,
        )

        self.categories = CategoryDjangoRepository()
        self.products = ProductDjangoRepository()
        self.companies = CompanyDjangoRepository()
        self.users = ApplicationUserDjangoRepository()
        self.shopping_carts = ShoppingCartDjangoRepository()
        self.order_headers = OrderHeaderDjangoRepository()
        self.order_details = OrderDetailDjangoRepository()

    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()
