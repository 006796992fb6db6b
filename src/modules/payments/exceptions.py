"""Payment domain exceptions."""

from __future__ import annotations


class PaymentGatewayError(Exception):
    """The payment gateway rejected or failed a request."""


class InvalidWebhookSignature(Exception):
    """A webhook payload could not be authenticated."""
