"""Unit tests for the transactional outbox.

Covers:
- ``record_domain_events`` writes one PENDING row per collected event.
- OutboxEvent state transitions (published / failed with retry count).
- ``relay_outbox_events`` publishes rows on the bus and marks failures.
"""

from __future__ import annotations

from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.outbox import record_domain_events
from modules.core.tasks import relay_outbox_events
from modules.orders.events import OrderCancelled, OrderStatusChanged
from modules.orders.models import OrderHeader

pytestmark = pytest.mark.unit


def _make_event(**overrides) -> OutboxEvent:
    defaults = {
        "event_type": "OrderCancelled",
        "payload": {"aggregate_id": str(uuid4()), "refunded": False},
        "aggregate_id": "abc-123",
        "topic": "orders",
    }
    defaults.update(overrides)
    return OutboxEvent.objects.create(**defaults)


# ==== record_domain_events


class TestRecordDomainEvents:
    def test_writes_one_row_per_event_and_clears(self):
        order = OrderHeader(name="Jane")
        order.add_domain_event(
            OrderStatusChanged(aggregate_id=order.id, old_status="Approved", new_status="InProcess")
        )
        order.add_domain_event(OrderCancelled(aggregate_id=order.id, refunded=True))

        count = record_domain_events(order, topic="orders")

        assert count == 2
        assert order.domain_events == []
        rows = list(OutboxEvent.objects.order_by("id"))
        assert [row.event_type for row in rows] == ["OrderStatusChanged", "OrderCancelled"]
        assert rows[0].payload["new_status"] == "InProcess"
        assert rows[1].payload["refunded"] is True
        assert rows[1].aggregate_id == str(order.id)
        assert all(row.status == EventStatus.PENDING for row in rows)

    def test_entity_without_events_writes_nothing(self):
        assert record_domain_events(object(), topic="orders") == 0
        assert OutboxEvent.objects.count() == 0


# ==== OutboxEvent


class TestOutboxEventTransitions:
    def test_defaults(self):
        event = _make_event()
        event.refresh_from_db()
        assert event.status == EventStatus.PENDING
        assert event.processed_at is None
        assert event.retry_count == 0

    def test_mark_as_published(self):
        event = _make_event()
        event.mark_as_published()
        event.refresh_from_db()
        assert event.status == EventStatus.PUBLISHED
        assert event.processed_at is not None

    def test_mark_as_failed_increments_retry(self):
        event = _make_event()
        event.mark_as_failed("Error 1")
        event.mark_as_failed("Error 2")
        event.refresh_from_db()
        assert event.status == EventStatus.FAILED
        assert event.retry_count == 2
        assert event.error_message == "Error 2"

    def test_str_representation(self):
        event = _make_event(aggregate_id="order-456")
        assert str(event) == "OrderCancelled [PENDING] (order-456)"


# ==== relay_outbox_events


class TestRelayOutboxEvents:
    def test_publishes_pending_rows(self):
        event = _make_event()
        with patch("modules.core.tasks.event_bus") as bus:
            result = relay_outbox_events()

        assert result == {"published": 1, "failed": 0}
        published = bus.publish.call_args.args[0]
        assert isinstance(published, OrderCancelled)
        event.refresh_from_db()
        assert event.status == EventStatus.PUBLISHED

    def test_unknown_event_type_is_marked_failed(self):
        event = _make_event(event_type="SomethingElse")
        result = relay_outbox_events()

        assert result == {"published": 0, "failed": 1}
        event.refresh_from_db()
        assert event.status == EventStatus.FAILED
        assert "SomethingElse" in event.error_message

    def test_handler_error_is_recorded(self):
        event = _make_event()
        with patch("modules.core.tasks.event_bus") as bus:
            bus.publish.side_effect = RuntimeError("handler exploded")
            result = relay_outbox_events()

        assert result == {"published": 0, "failed": 1}
        event.refresh_from_db()
        assert event.status == EventStatus.FAILED
        assert event.error_message == "handler exploded"

    def test_skips_rows_already_processed(self):
        done = _make_event()
        done.mark_as_published()
        with patch("modules.core.tasks.event_bus") as bus:
            result = relay_outbox_events()
        assert result == {"published": 0, "failed": 0}
        bus.publish.assert_not_called()


def test_pending_excludes_processed_rows():
    waiting = _make_event()
    _make_event().mark_as_published()
    _make_event().mark_as_failed("boom")

    assert list(OutboxEvent.objects.pending()) == [waiting]
