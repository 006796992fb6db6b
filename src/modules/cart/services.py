"""Cart and checkout use cases.

Business rules:
- One cart line per (user, product); adding again increases the count,
  never past MAX_LINE_COUNT.
- "Minus" on a line with a count of one removes it.
- Line prices follow the product's quantity tiers.
- Checkout: users without a company pay through a gateway session
  (Pending/Pending until paid); company users are approved at once on
  delayed payment terms (Approved/DelayedPayment).
- The cart is cleared when the order is confirmed.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.conf import settings
from django.utils import timezone

from modules.cart.dtos import MAX_LINE_COUNT, CartDTO, CartSummaryDTO
from modules.cart.exceptions import CartItemNotFound, CartLineLimitExceeded, EmptyCart
from modules.cart.models import ShoppingCart
from modules.catalog.exceptions import ProductNotFound
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.dtos import ShippingDetailsDTO
from modules.orders.events import OrderPlaced
from modules.orders.models import OrderDetail, OrderHeader
from modules.orders.services import line_items_for

if TYPE_CHECKING:
    from modules.cart.dtos import AddToCartDTO
    from modules.core.unit_of_work import IUnitOfWork
    from modules.orders.services import OrderService
    from modules.payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order: OrderHeader
    checkout_url: Optional[str] = None
    session_id: Optional[str] = None


class CartService:
    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cart(self, user: Any) -> CartDTO:
        return CartDTO.from_entities(self._uow.shopping_carts.for_user(user.pk))

    def summary(self, user: Any) -> CartSummaryDTO:
        """The cart with a shipping draft taken from the user's profile."""
        cart = self.get_cart(user)
        return CartSummaryDTO(
            **cart.model_dump(),
            shipping=ShippingDetailsDTO.draft_from_user(user),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_to_cart(self, user: Any, dto: AddToCartDTO) -> ShoppingCart:
        """Raises:
        ProductNotFound: the product does not exist.
        CartLineLimitExceeded: the line would hold more than MAX_LINE_COUNT.
        """
        carts = self._uow.shopping_carts
        with self._uow.atomic():
            if not self._uow.products.exists(pk=dto.product_id):
                raise ProductNotFound(f"Product {dto.product_id} not found.")

            line = carts.get_line(user.pk, dto.product_id)
            if line is not None:
                line = self._grow(line, dto.count)
            else:
                line = carts.save(
                    ShoppingCart(user=user, product_id=dto.product_id, count=dto.count)
                )

        logger.info(
            "cart.item_added",
            user_id=str(user.pk),
            product_id=str(dto.product_id),
            count=line.count,
        )
        return line

    def plus(self, user: Any, cart_id: Any) -> ShoppingCart:
        with self._uow.atomic():
            line = self._get_line(user, cart_id)
            return self._grow(line, 1)

    def minus(self, user: Any, cart_id: Any) -> Optional[ShoppingCart]:
        """Decrease the count, removing the line at one.  Returns ``None`` if removed."""
        with self._uow.atomic():
            line = self._get_line(user, cart_id)
            if line.count <= 1:
                self._uow.shopping_carts.delete(line.pk)
                logger.info("cart.item_removed", user_id=str(user.pk), cart_id=str(cart_id))
                return None
            return self._uow.shopping_carts.increment_count(line, -1)

    def remove(self, user: Any, cart_id: Any) -> None:
        with self._uow.atomic():
            line = self._get_line(user, cart_id)
            self._uow.shopping_carts.delete(line.pk)
        logger.info("cart.item_removed", user_id=str(user.pk), cart_id=str(cart_id))

    def _get_line(self, user: Any, cart_id: Any) -> ShoppingCart:
        line = self._uow.shopping_carts.get_for_user(cart_id, user.pk)
        if line is None:
            raise CartItemNotFound(f"Cart item {cart_id} not found.")
        return line

    def _grow(self, line: ShoppingCart, delta: int) -> ShoppingCart:
        if line.count + delta > MAX_LINE_COUNT:
            raise CartLineLimitExceeded(
                f"A cart line holds at most {MAX_LINE_COUNT} copies."
            )
        return self._uow.shopping_carts.increment_count(line, delta)


class CheckoutService:
    """Turns a cart into an order and confirms it once paid.

    Receives the unit of work, the payment gateway and the order service
    via constructor injection.
    """

    def __init__(
        self, uow: IUnitOfWork, gateway: PaymentGateway, orders: OrderService
    ) -> None:
        self._uow = uow
        self._gateway = gateway
        self._orders = orders

    def place_order(self, user: Any, dto: ShippingDetailsDTO) -> CheckoutResult:
        """Create the order from the user's cart.

        Raises:
            EmptyCart: the cart has no lines.
            PaymentGatewayError: the gateway rejected the session; no order
                is created.
        """
        lines = list(self._uow.shopping_carts.for_user(user.pk))
        if not lines:
            raise EmptyCart("Your shopping cart is empty.")

        is_company = user.company_id is not None
        log = logger.bind(user_id=str(user.pk), company_order=is_company)
        session = None

        with self._uow.atomic():
            order = OrderHeader(
                user=user,
                order_date=timezone.now(),
                order_total=sum((line.subtotal for line in lines), Decimal("0.00")),
                order_status=OrderStatus.APPROVED if is_company else OrderStatus.PENDING,
                payment_status=(
                    PaymentStatus.DELAYED_PAYMENT if is_company else PaymentStatus.PENDING
                ),
                **dto.model_dump(),
            )
            order._status_changed_by = user
            order.add_domain_event(
                OrderPlaced(
                    aggregate_id=order.id,
                    user_id=str(user.pk),
                    order_total=str(order.order_total),
                    payment_status=order.payment_status,
                )
            )
            self._uow.order_headers.save(order)
            details = self._uow.order_details.add_many(
                OrderDetail(
                    order_header=order,
                    product=line.product,
                    count=line.count,
                    price=line.price,
                )
                for line in lines
            )

            if not is_company:
                session = self._gateway.create_checkout_session(
                    line_items_for(details),
                    success_url=f"{settings.SITE_DOMAIN}/cart/order-confirmation/{order.id}/",
                    cancel_url=f"{settings.SITE_DOMAIN}/cart/",
                    reference=str(order.id),
                )
                self._uow.order_headers.update_payment_identifiers(
                    order.id, session.session_id, session.payment_intent_id
                )

        log.info("checkout.order_placed", order_id=str(order.id), total=str(order.order_total))

        if session is None:
            return CheckoutResult(order=self.confirm_order(order.id, user))
        return CheckoutResult(
            order=self._orders.get_order(order.id),
            checkout_url=session.url,
            session_id=session.session_id,
        )

    def confirm_order(self, order_id: Any, user: Any = None) -> OrderHeader:
        """Approve a paid customer order and clear the cart.

        ``user=None`` is the webhook path (no ownership check).

        Raises:
            OrderNotFound: the order does not exist or is not visible to *user*.
            PaymentGatewayError: the session could not be retrieved.
        """
        order = self._orders.get_order(order_id, user)
        log = logger.bind(order_id=str(order.id))

        if order.payment_status == PaymentStatus.PENDING and order.session_id:
            session = self._gateway.retrieve_checkout_session(order.session_id)
            if session.is_paid:
                with self._uow.atomic():
                    self._orders.record_payment(
                        order, session, OrderStatus.APPROVED, changed_by=user
                    )
            else:
                log.info("checkout.session_unpaid", session_id=order.session_id)

        with self._uow.atomic():
            self._uow.shopping_carts.clear_for_user(order.user_id)

        log.info("checkout.order_confirmed")
        return self._orders.get_order(order_id)
