"""Signals for automatic order status history tracking.

Callers may set ``_status_change_notes`` and ``_status_changed_by`` on
the instance before saving; both are consumed by the history row.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, cast

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from modules.orders.models import OrderHeader, OrderStatusHistory

_TRANSIENT_ATTRS = (
    "_previous_status",
    "_previous_payment_status",
    "_status_change_notes",
    "_status_changed_by",
)


class _OrderStatusAware(Protocol):
    _previous_status: str | None
    _previous_payment_status: str | None
    _status_change_notes: str | None
    _status_changed_by: Any


@receiver(pre_save, sender=OrderHeader)
def _capture_previous_status(sender, instance: OrderHeader, **kwargs) -> None:
    status_instance = cast(_OrderStatusAware, instance)
    previous = None
    if not instance._state.adding:
        previous = (
            sender.objects.filter(pk=instance.pk)
            .values_list("order_status", "payment_status")
            .first()
        )
    status_instance._previous_status, status_instance._previous_payment_status = (
        previous or (None, None)
    )


@receiver(post_save, sender=OrderHeader)
def _create_status_history(
    sender, instance: OrderHeader, created: bool, **kwargs
) -> None:
    status_instance = cast(_OrderStatusAware, instance)
    previous_status: Optional[str] = getattr(status_instance, "_previous_status", None)
    previous_payment: Optional[str] = getattr(
        status_instance, "_previous_payment_status", None
    )

    changed = (
        created
        or previous_status != instance.order_status
        or previous_payment != instance.payment_status
    )
    if changed:
        notes = getattr(status_instance, "_status_change_notes", None)
        if created and notes is None:
            notes = "Order placed"
        OrderStatusHistory.objects.create(
            order=instance,
            old_status=previous_status,
            new_status=instance.order_status,
            old_payment_status=previous_payment,
            payment_status=instance.payment_status,
            user=getattr(status_instance, "_status_changed_by", None),
            notes=notes or "",
        )

    for attr in _TRANSIENT_ATTRS:
        if hasattr(instance, attr):
            delattr(instance, attr)
