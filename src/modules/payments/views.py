"""Payment gateway webhook endpoint.

Public (the gateway cannot authenticate as a user); authenticity comes
from the signature header instead.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.cart.services import CheckoutService
from modules.core.unit_of_work import DjangoUnitOfWork
from modules.orders.services import OrderService
from modules.payments.exceptions import InvalidWebhookSignature, PaymentGatewayError
from modules.payments.gateway import get_gateway
from modules.payments.services import PaymentWebhookService

SIGNATURE_HEADER = "Stripe-Signature"


class PaymentWebhookView(APIView):
    """POST /api/v1/payments/webhook/"""

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_scope = "webhook"

    def post(self, request: Request) -> Response:
        uow = DjangoUnitOfWork()
        gateway = get_gateway()
        orders = OrderService(uow=uow, gateway=gateway)
        service = PaymentWebhookService(
            uow=uow,
            gateway=gateway,
            checkout=CheckoutService(uow=uow, gateway=gateway, orders=orders),
            orders=orders,
        )

        try:
            result = service.handle(request.body, request.headers.get(SIGNATURE_HEADER, ""))
        except InvalidWebhookSignature as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({"status": result})
