"""Shopping cart and checkout API views.

All endpoints act on the authenticated user's own cart.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.cart.dtos import AddToCartDTO
from modules.cart.exceptions import CartItemNotFound, CartLineLimitExceeded, EmptyCart
from modules.cart.services import CartService, CheckoutService
from modules.catalog.exceptions import ProductNotFound
from modules.core.unit_of_work import DjangoUnitOfWork
from modules.orders.dtos import SHIPPING_FIELDS, ShippingDetailsDTO
from modules.orders.exceptions import OrderNotFound
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.payments.exceptions import PaymentGatewayError
from modules.payments.gateway import get_gateway


class CartViewSet(ViewSet):
    """``/api/v1/cart/``: lines, quantity buttons, summary and checkout."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        uow = DjangoUnitOfWork()
        gateway = get_gateway()
        self._cart = CartService(uow=uow)
        self._checkout = CheckoutService(
            uow=uow, gateway=gateway, orders=OrderService(uow=uow, gateway=gateway)
        )

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "checkout" if self.action == "checkout" else None
        return super().get_throttles()

    def _cart_response(self, request: Request, code: int = status.HTTP_200_OK) -> Response:
        return Response(
            self._cart.get_cart(request.user).model_dump(mode="json"), status=code
        )

    # ------------------------------------------------------------------
    # Cart lines
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        return self._cart_response(request)

    def create(self, request: Request) -> Response:
        """POST /api/v1/cart/ {"product_id", "count"}"""
        try:
            dto = AddToCartDTO(
                product_id=request.data.get("product_id"),
                count=request.data.get("count", 1),
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            self._cart.add_to_cart(request.user, dto)
        except ProductNotFound:
            return Response(
                {"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND
            )
        except CartLineLimitExceeded as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return self._cart_response(request, status.HTTP_201_CREATED)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/cart/{pk}/"""
        try:
            self._cart.remove(request.user, pk)
        except CartItemNotFound:
            return Response(
                {"detail": "Cart item not found."}, status=status.HTTP_404_NOT_FOUND
            )
        return self._cart_response(request)

    @action(detail=True, methods=["post"])
    def plus(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/cart/{pk}/plus/"""
        try:
            self._cart.plus(request.user, pk)
        except CartItemNotFound:
            return Response(
                {"detail": "Cart item not found."}, status=status.HTTP_404_NOT_FOUND
            )
        except CartLineLimitExceeded as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return self._cart_response(request)

    @action(detail=True, methods=["post"])
    def minus(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/cart/{pk}/minus/"""
        try:
            self._cart.minus(request.user, pk)
        except CartItemNotFound:
            return Response(
                {"detail": "Cart item not found."}, status=status.HTTP_404_NOT_FOUND
            )
        return self._cart_response(request)

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def summary(self, request: Request) -> Response:
        """GET /api/v1/cart/summary/"""
        return Response(self._cart.summary(request.user).model_dump(mode="json"))

    @action(detail=False, methods=["post"])
    def checkout(self, request: Request) -> Response:
        """POST /api/v1/cart/checkout/ with the shipping block.

        Customers receive ``checkout_url`` to complete the payment; company
        orders come back already approved.
        """
        data = request.data
        try:
            dto = ShippingDetailsDTO(**{f: data.get(f, "") for f in SHIPPING_FIELDS})
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = self._checkout.place_order(request.user, dto)
        except EmptyCart as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(
            {
                "order": OrderSerializer(result.order).data,
                "checkout_url": result.checkout_url,
                "session_id": result.session_id,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(
        detail=False,
        methods=["get", "post"],
        url_path=r"order-confirmation/(?P<order_id>[^/.]+)",
    )
    def order_confirmation(self, request: Request, order_id: str | None = None) -> Response:
        """GET|POST /api/v1/cart/order-confirmation/{order_id}/"""
        try:
            order = self._checkout.confirm_order(order_id, request.user)
        except OrderNotFound:
            return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(OrderSerializer(order).data)
