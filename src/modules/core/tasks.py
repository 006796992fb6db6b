"""Asynchronous tasks of the core module."""

import structlog
from celery import shared_task

from modules.core.models import OutboxEvent
from shared.domain.events import event_from_payload
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = 100):
    """Publish pending outbox rows on the in-process event bus.

    A row whose type is unknown, or whose handler raises, is marked
    ``FAILED`` with the error so it can be inspected and replayed.
    """
    published = failed = 0
    pending = OutboxEvent.objects.pending()[:batch_size]

    for outbox_event in pending:
        log = logger.bind(
            outbox_event_id=str(outbox_event.id),
            event_type=outbox_event.event_type,
            aggregate_id=outbox_event.aggregate_id,
        )
        event = event_from_payload(outbox_event.event_type, outbox_event.payload)
        if event is None:
            log.warning("outbox.unknown_event_type")
            outbox_event.mark_as_failed(
                f"Unknown event type {outbox_event.event_type}."
            )
            failed += 1
            continue

        try:
            event_bus.publish(event)
        except Exception as exc:  # noqa: BLE001 - recorded on the outbox row
            log.exception("outbox.publish_failed")
            outbox_event.mark_as_failed(str(exc))
            failed += 1
            continue

        outbox_event.mark_as_published()
        published += 1

    logger.info("outbox.relayed", published=published, failed=failed)
    return {"published": published, "failed": failed}
