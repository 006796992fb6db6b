"""Django ORM implementations of the order repositories.

Status and identifier updates lock the header row with
``select_for_update()`` and save through the model so the status history
signals fire.  Domain events collected on a header are written to the
outbox in the same transaction as the header itself.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.core.outbox import record_domain_events
from modules.core.repositories.django_repository import DjangoRepository
from modules.orders.constants import LIST_STATUS_FILTERS, ORDER_TOPIC
from modules.orders.exceptions import OrderDeletionNotAllowed
from modules.orders.models import OrderDetail, OrderHeader
from modules.orders.repositories.interfaces import (
    IOrderDetailRepository,
    IOrderHeaderRepository,
)

logger = structlog.get_logger(__name__)


class OrderHeaderDjangoRepository(DjangoRepository[OrderHeader], IOrderHeaderRepository):
    """Concrete order header repository backed by Django ORM."""

    model = OrderHeader
    select_related = ("user",)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_with_details(self, id: Any) -> Optional[OrderHeader]:
        """Prefetches details→product (with category) and the status history."""
        try:
            return (
                self._queryset()
                .prefetch_related("details__product__category", "status_history")
                .filter(pk=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any) -> Optional[OrderHeader]:
        """Must be called inside a transaction."""
        try:
            return OrderHeader.objects.select_for_update().filter(pk=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_session_id(self, session_id: str) -> Optional[OrderHeader]:
        if not session_id:
            return None
        return self.get(session_id=session_id)

    def list_for_user(self, user_id: Any = None, status: Optional[str] = None) -> QuerySet:
        queryset = self._queryset()
        if user_id is not None:
            queryset = queryset.filter(user_id=user_id)
        lookup = LIST_STATUS_FILTERS.get((status or "").lower())
        if lookup:
            queryset = queryset.filter(**lookup)
        return queryset

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: OrderHeader) -> OrderHeader:
        """Persist the header and move its domain events to the outbox."""
        entity = super().save(entity)
        self.record_events(entity)
        return entity

    def record_events(self, entity: OrderHeader) -> int:
        count = record_domain_events(entity, topic=ORDER_TOPIC)
        if count:
            logger.info("order.events_recorded", order_id=str(entity.pk), event_count=count)
        return count

    def delete(self, id: Any) -> bool:
        raise OrderDeletionNotAllowed(f"Order {id} cannot be deleted; cancel it instead.")

    def delete_many(self, entities: Iterable[OrderHeader]) -> int:
        raise OrderDeletionNotAllowed("Orders cannot be deleted; cancel them instead.")

    @transaction.atomic
    def update_status(
        self,
        id: Any,
        order_status: str,
        payment_status: Optional[str] = None,
        *,
        notes: str = "",
        changed_by: Any = None,
    ) -> None:
        order = self.get_for_update(id)
        if order is None:
            logger.warning("order.status_update_skipped", order_id=str(id))
            return

        old_status = order.order_status
        order.order_status = order_status
        update_fields = ["order_status"]
        if payment_status:
            order.payment_status = payment_status
            update_fields.append("payment_status")

        order._status_change_notes = notes
        order._status_changed_by = changed_by
        order.save(update_fields=update_fields)
        logger.info(
            "order.status_updated",
            order_id=str(id),
            old_status=old_status,
            order_status=order_status,
            payment_status=order.payment_status,
        )

    @transaction.atomic
    def update_payment_identifiers(
        self, id: Any, session_id: Optional[str], payment_intent_id: Optional[str]
    ) -> None:
        order = self.get_for_update(id)
        if order is None:
            logger.warning("order.payment_identifiers_skipped", order_id=str(id))
            return

        update_fields = []
        if session_id:
            order.session_id = session_id
            update_fields.append("session_id")
        if payment_intent_id:
            order.payment_intent_id = payment_intent_id
            order.payment_date = timezone.now()
            update_fields += ["payment_intent_id", "payment_date"]
        if not update_fields:
            return

        order.save(update_fields=update_fields)
        logger.info(
            "order.payment_identifiers_updated",
            order_id=str(id),
            session_id=session_id or None,
            has_payment_intent=bool(payment_intent_id),
        )


class OrderDetailDjangoRepository(DjangoRepository[OrderDetail], IOrderDetailRepository):
    model = OrderDetail
    select_related = ("product",)

    @transaction.atomic
    def add_many(self, details: Iterable[OrderDetail]) -> List[OrderDetail]:
        created = OrderDetail.objects.bulk_create(list(details))
        if created:
            logger.info(
                "orderdetail.added",
                order_id=str(created[0].order_header_id),
                count=len(created),
            )
        return created

    def list_for_order(self, order_id: Any) -> QuerySet:
        return self.list({"order_header_id": order_id})
