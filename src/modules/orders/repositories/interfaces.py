"""Order repository interfaces.

``IOrderHeaderRepository`` extends ``IRepository[OrderHeader]`` with the
two narrow updaters of the payment lifecycle, gateway session look-up,
and row locking.  The Service Layer depends exclusively on these
contracts (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import OrderDetail, OrderHeader


class IOrderHeaderRepository(IRepository["OrderHeader"]):
    @abstractmethod
    def update_status(
        self,
        id: Any,
        order_status: str,
        payment_status: Optional[str] = None,
        *,
        notes: str = "",
        changed_by: Any = None,
    ) -> None:
        """Set the order status and, when non-empty, the payment status.

        Unknown ids are ignored.
        """

    @abstractmethod
    def update_payment_identifiers(
        self, id: Any, session_id: Optional[str], payment_intent_id: Optional[str]
    ) -> None:
        """Store gateway identifiers; a payment intent stamps ``payment_date``.

        Empty values leave the stored identifiers untouched and unknown ids
        are ignored.
        """

    @abstractmethod
    def get_by_session_id(self, session_id: str) -> Optional[OrderHeader]:
        """Retrieve the order correlated with a gateway checkout session."""

    @abstractmethod
    def get_for_update(self, id: Any) -> Optional[OrderHeader]:
        """Retrieve an order holding a row-level lock."""

    @abstractmethod
    def get_with_details(self, id: Any) -> Optional[OrderHeader]:
        """Retrieve an order with details, products and history prefetched."""

    @abstractmethod
    def list_for_user(
        self, user_id: Any = None, status: Optional[str] = None
    ) -> QuerySet:
        """Orders of one user (every order when ``user_id`` is ``None``)."""

    @abstractmethod
    def record_events(self, entity: OrderHeader) -> int:
        """Write the entity's pending domain events to the outbox."""


class IOrderDetailRepository(IRepository["OrderDetail"]):
    @abstractmethod
    def add_many(self, details: Iterable[OrderDetail]) -> List[OrderDetail]:
        """Insert the line items of a new order."""

    @abstractmethod
    def list_for_order(self, order_id: Any) -> QuerySet:
        """Line items of an order with their products."""
