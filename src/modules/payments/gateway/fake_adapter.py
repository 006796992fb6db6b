"""Configurable fake payment gateway for development and testing.

Sessions live in memory; ``mark_session_paid`` plays the part of the
customer completing the hosted checkout.  Webhooks are accepted when
signed with ``test-signature`` and use the same JSON shape as Stripe's
``checkout.session.*`` events.
"""

import json
from typing import Sequence
from uuid import uuid4

from modules.payments.exceptions import InvalidWebhookSignature, PaymentGatewayError
from modules.payments.gateway.port import (
    SESSION_PAID,
    CheckoutLineItem,
    CheckoutSession,
    PaymentGateway,
    RefundResult,
    WebhookEvent,
)

FAKE_WEBHOOK_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """In-memory payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.sessions: dict[str, CheckoutSession] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def mark_session_paid(
        self, session_id: str, payment_intent_id: str | None = None
    ) -> CheckoutSession:
        session = CheckoutSession(
            session_id=session_id,
            url=self.sessions[session_id].url,
            payment_status=SESSION_PAID,
            payment_intent_id=payment_intent_id or f"fake_pi_{uuid4().hex[:12]}",
        )
        self.sessions[session_id] = session
        return session

    def create_checkout_session(
        self,
        line_items: Sequence[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        reference: str,
    ) -> CheckoutSession:
        self.calls.append(
            {
                "method": "create_checkout_session",
                "line_items": list(line_items),
                "success_url": success_url,
                "cancel_url": cancel_url,
                "reference": reference,
            }
        )
        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)

        session_id = f"fake_cs_{uuid4().hex[:16]}"
        session = CheckoutSession(
            session_id=session_id,
            url=f"https://checkout.fake.local/pay/{session_id}",
        )
        self.sessions[session_id] = session
        return session

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        self.calls.append({"method": "retrieve_checkout_session", "session_id": session_id})
        try:
            return self.sessions[session_id]
        except KeyError:
            raise PaymentGatewayError(f"No such checkout session: {session_id}") from None

    def create_refund(self, payment_intent_id: str, reason: str) -> RefundResult:
        self.calls.append(
            {
                "method": "create_refund",
                "payment_intent_id": payment_intent_id,
                "reason": reason,
            }
        )
        if self.should_succeed:
            return RefundResult(
                success=True,
                gateway_refund_id=f"fake_re_{uuid4().hex[:12]}",
                gateway_status="succeeded",
            )
        return RefundResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != FAKE_WEBHOOK_SIGNATURE:
            raise InvalidWebhookSignature("Webhook signature verification failed.")
        try:
            body = json.loads(payload)
        except ValueError as exc:
            raise InvalidWebhookSignature("Webhook payload is not valid JSON.") from exc

        data = body.get("data", {}).get("object", {})
        session = None
        if data.get("object", "checkout.session") == "checkout.session" and data.get("id"):
            session = CheckoutSession(
                session_id=data["id"],
                url=data.get("url"),
                payment_status=data.get("payment_status", "unpaid"),
                payment_intent_id=data.get("payment_intent"),
            )
        return WebhookEvent(event_type=body.get("type", ""), session=session)
