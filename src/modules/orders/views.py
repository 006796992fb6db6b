"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Every
authenticated user can list and view their own orders and pay delayed
orders; processing, shipping, cancelling and editing are staff actions.
Domain exceptions are caught and translated into HTTP status codes here.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.permissions import IsAdminOrEmployee
from modules.core.unit_of_work import DjangoUnitOfWork
from modules.orders.dtos import SHIPPING_FIELDS, ShipOrderDTO, UpdateOrderDetailsDTO
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.orders.filters import OrderFilter
from modules.orders.models import OrderHeader
from modules.orders.serializers import OrderListSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.payments.exceptions import PaymentGatewayError
from modules.payments.gateway import get_gateway

STAFF_ACTIONS = {"update", "partial_update", "start_processing", "ship", "cancel"}


def _not_found() -> Response:
    return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)


class OrderViewSet(ListModelMixin, GenericViewSet):
    """Order management.

    ``?status=`` selects a tab: ``pending`` (delayed payment),
    ``inprocess``, ``completed``, ``approved``; anything else lists all.
    """

    queryset = OrderHeader.objects.all()
    serializer_class = OrderListSerializer
    filterset_class = OrderFilter
    search_fields = ["name", "user__email", "tracking_number"]
    ordering_fields = ["order_date", "order_total", "order_status"]
    ordering = ["-order_date"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(uow=DjangoUnitOfWork(), gateway=get_gateway())

    def get_permissions(self):
        if self.action in STAFF_ACTIONS:
            return [IsAdminOrEmployee()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return self._service.list_orders(
            self.request.user, self.request.query_params.get("status")
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, request.user)
        except OrderNotFound:
            return _not_found()
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Staff actions
    # ------------------------------------------------------------------

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/orders/{pk}/ : shipping block, carrier, tracking."""
        data = request.data
        fields = (*SHIPPING_FIELDS, "carrier", "tracking_number")
        try:
            dto = UpdateOrderDetailsDTO(**{f: data[f] for f in fields if f in data})
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.update_order_details(pk, dto, request.user)
        except OrderNotFound:
            return _not_found()
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    @action(detail=True, methods=["post"], url_path="start-processing")
    def start_processing(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/start-processing/"""
        try:
            order = self._service.start_processing(pk, request.user)
        except OrderNotFound:
            return _not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def ship(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/ship/"""
        try:
            dto = ShipOrderDTO(
                carrier=request.data.get("carrier", ""),
                tracking_number=request.data.get("tracking_number", ""),
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.ship_order(pk, dto, request.user)
        except OrderNotFound:
            return _not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Approved payments are refunded through the gateway first.
        """
        try:
            order = self._service.cancel_order(pk, request.user)
        except OrderNotFound:
            return _not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Delayed payment
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="pay-now")
    def pay_now(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/pay-now/ : returns the hosted checkout URL."""
        try:
            session = self._service.pay_now(pk, request.user)
        except OrderNotFound:
            return _not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(
            {"order_id": pk, "session_id": session.session_id, "checkout_url": session.url}
        )

    @action(detail=True, methods=["get", "post"], url_path="payment-confirmation")
    def payment_confirmation(self, request: Request, pk: str | None = None) -> Response:
        """GET|POST /api/v1/orders/{pk}/payment-confirmation/"""
        try:
            order = self._service.confirm_payment(pk, request.user)
        except OrderNotFound:
            return _not_found()
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(OrderSerializer(order).data)
