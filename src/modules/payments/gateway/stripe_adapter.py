"""Stripe payment gateway adapter (stripe-python SDK).

Hosted Checkout sessions in ``payment`` mode, full refunds by payment
intent, and webhook verification with the endpoint signing secret.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Sequence

import stripe
import structlog

from modules.payments.exceptions import InvalidWebhookSignature, PaymentGatewayError
from modules.payments.gateway.port import (
    CheckoutLineItem,
    CheckoutSession,
    PaymentGateway,
    RefundResult,
    WebhookEvent,
)

logger = structlog.get_logger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount (dollars) to Stripe's minor units (cents)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _intent_id(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.get("id")


def _session_from_stripe(obj: Any) -> CheckoutSession:
    return CheckoutSession(
        session_id=obj["id"],
        url=obj.get("url"),
        payment_status=obj.get("payment_status") or "unpaid",
        payment_intent_id=_intent_id(obj.get("payment_intent")),
    )


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str, currency: str = "usd") -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.currency = currency

    def create_checkout_session(
        self,
        line_items: Sequence[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        reference: str,
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
                client_reference_id=reference,
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "unit_amount": to_minor_units(item.unit_amount),
                            "product_data": {"name": item.name},
                        },
                        "quantity": item.quantity,
                    }
                    for item in line_items
                ],
            )
        except stripe.StripeError as exc:
            logger.warning("stripe.checkout_session_failed", reference=reference, error=str(exc))
            raise PaymentGatewayError(str(exc)) from exc
        return _session_from_stripe(session)

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.warning("stripe.session_retrieve_failed", session_id=session_id, error=str(exc))
            raise PaymentGatewayError(str(exc)) from exc
        return _session_from_stripe(session)

    def create_refund(self, payment_intent_id: str, reason: str) -> RefundResult:
        try:
            refund = stripe.Refund.create(
                api_key=self.api_key,
                payment_intent=payment_intent_id,
                reason=reason,
            )
        except stripe.StripeError as exc:
            return RefundResult(success=False, gateway_status="failed", failure_reason=str(exc))
        return RefundResult(
            success=refund.get("status") in ("succeeded", "pending"),
            gateway_refund_id=refund.get("id"),
            gateway_status=refund.get("status"),
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise InvalidWebhookSignature(str(exc)) from exc

        obj = event["data"]["object"]
        session = _session_from_stripe(obj) if obj.get("object") == "checkout.session" else None
        return WebhookEvent(event_type=event["type"], session=session)
