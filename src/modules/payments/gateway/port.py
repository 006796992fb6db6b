"""Payment gateway port (abstract interface).

Adapters translate hosted checkout sessions, refunds and webhook events
of a concrete processor into the value objects below.  Amounts are
``Decimal`` in the currency's major unit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

SESSION_PAID = "paid"
CHECKOUT_COMPLETED = "checkout.session.completed"
REFUND_REASON_REQUESTED_BY_CUSTOMER = "requested_by_customer"


@dataclass(frozen=True)
class CheckoutLineItem:
    name: str
    unit_amount: Decimal
    quantity: int


@dataclass(frozen=True)
class CheckoutSession:
    """A hosted checkout session as reported by the gateway."""

    session_id: str
    url: str | None = None
    payment_status: str = "unpaid"
    payment_intent_id: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == SESSION_PAID


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund attempt."""

    success: bool
    gateway_refund_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class WebhookEvent:
    event_type: str
    session: CheckoutSession | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface.

    Adapters raise ``PaymentGatewayError`` when the gateway cannot be
    reached or rejects a session request.
    """

    @abstractmethod
    def create_checkout_session(
        self,
        line_items: Sequence[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        reference: str,
    ) -> CheckoutSession:
        """Open a hosted checkout session for *line_items*."""
        ...

    @abstractmethod
    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Fetch the current state of a checkout session."""
        ...

    @abstractmethod
    def create_refund(self, payment_intent_id: str, reason: str) -> RefundResult:
        """Refund the full amount captured by a payment intent."""
        ...

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """Authenticate and parse a webhook body.

        Raises ``InvalidWebhookSignature`` when verification fails.
        """
        ...
