"""Unit tests for CartService.

Covers:
- add_to_cart: new line, merge into an existing line, unknown product,
  per-line maximum on merge and "plus".
- plus / minus / remove, including "minus" removing a line at one.
- Tier prices and totals of the cart DTO.
- summary: shipping draft from the user's profile.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.cart.dtos import AddToCartDTO
from modules.cart.exceptions import CartItemNotFound, CartLineLimitExceeded
from modules.cart.models import ShoppingCart
from modules.cart.services import CartService
from modules.catalog.exceptions import ProductNotFound
from modules.core.unit_of_work import DjangoUnitOfWork

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CartService(uow=DjangoUnitOfWork())


def _add(service, user, product, count=1):
    return service.add_to_cart(user, AddToCartDTO(product_id=product.id, count=count))


# ==== add_to_cart


class TestAddToCart:
    def test_creates_line(self, service, customer, product):
        line = _add(service, customer, product, 3)

        assert line.count == 3
        assert ShoppingCart.objects.filter(user=customer).count() == 1

    def test_same_product_merges_into_one_line(self, service, customer, product):
        _add(service, customer, product, 2)
        line = _add(service, customer, product, 5)

        assert line.count == 7
        assert ShoppingCart.objects.filter(user=customer).count() == 1

    def test_lines_are_per_user(self, service, customer, other_customer, product):
        _add(service, customer, product, 2)
        _add(service, other_customer, product, 1)

        assert service.get_cart(customer).lines[0].count == 2
        assert service.get_cart(other_customer).lines[0].count == 1

    def test_unknown_product_raises(self, service, customer):
        with pytest.raises(ProductNotFound):
            service.add_to_cart(customer, AddToCartDTO(product_id=uuid4(), count=1))

    def test_deleted_product_raises(self, service, customer, product):
        product.delete()
        with pytest.raises(ProductNotFound):
            _add(service, customer, product)

    def test_merge_past_line_maximum_is_rejected(self, service, customer, product):
        _add(service, customer, product, 600)

        with pytest.raises(CartLineLimitExceeded):
            _add(service, customer, product, 401)

        assert ShoppingCart.objects.get(user=customer).count == 600

    def test_merge_up_to_line_maximum(self, service, customer, product):
        _add(service, customer, product, 600)
        assert _add(service, customer, product, 400).count == 1000

    @pytest.mark.parametrize("count", [0, 1001])
    def test_count_bounds(self, count):
        with pytest.raises(ValidationError):
            AddToCartDTO(product_id=uuid4(), count=count)


# ==== quantity buttons


class TestQuantityButtons:
    def test_plus_increments(self, service, customer, product):
        line = _add(service, customer, product, 1)
        assert service.plus(customer, line.id).count == 2

    def test_plus_at_line_maximum_is_rejected(self, service, customer, product):
        line = _add(service, customer, product, 1000)

        with pytest.raises(CartLineLimitExceeded):
            service.plus(customer, line.id)

        line.refresh_from_db()
        assert line.count == 1000

    def test_minus_decrements(self, service, customer, product):
        line = _add(service, customer, product, 3)
        assert service.minus(customer, line.id).count == 2

    def test_minus_at_one_removes_line(self, service, customer, product):
        line = _add(service, customer, product, 1)

        assert service.minus(customer, line.id) is None
        assert not ShoppingCart.objects.filter(pk=line.id).exists()

    def test_remove(self, service, customer, product):
        line = _add(service, customer, product, 4)
        service.remove(customer, line.id)
        assert service.get_cart(customer).lines == []

    def test_cannot_touch_another_users_line(self, service, customer, other_customer, product):
        line = _add(service, other_customer, product, 1)
        with pytest.raises(CartItemNotFound):
            service.plus(customer, line.id)
        with pytest.raises(CartItemNotFound):
            service.remove(customer, line.id)

    def test_unknown_line_raises(self, service, customer):
        with pytest.raises(CartItemNotFound):
            service.minus(customer, "not-a-uuid")


# ==== totals


class TestCartTotals:
    def test_tier_prices_and_total(self, service, customer, make_product):
        single = make_product(title="Single")
        bulk = make_product(title="Bulk")
        wholesale = make_product(title="Wholesale")
        _add(service, customer, single, 2)
        _add(service, customer, bulk, 51)
        _add(service, customer, wholesale, 101)

        cart = service.get_cart(customer)
        prices = {line.title: line.price for line in cart.lines}

        assert prices == {
            "Single": Decimal("10.00"),
            "Bulk": Decimal("8.00"),
            "Wholesale": Decimal("5.00"),
        }
        assert cart.order_total == Decimal("20.00") + Decimal("408.00") + Decimal("505.00")
        assert cart.item_count == 3

    def test_tier_follows_quantity_changes(self, service, customer, product):
        line = _add(service, customer, product, 50)
        assert service.get_cart(customer).lines[0].price == Decimal("10.00")

        service.plus(customer, line.id)

        assert service.get_cart(customer).lines[0].price == Decimal("8.00")

    def test_empty_cart(self, service, customer):
        cart = service.get_cart(customer)
        assert cart.lines == []
        assert cart.order_total == Decimal("0.00")


def test_summary_prefills_shipping_from_profile(service, customer, product):
    _add(service, customer, product, 1)

    summary = service.summary(customer)

    assert summary.shipping["name"] == "Jane Reader"
    assert summary.shipping["postal_code"] == "60601"
    assert summary.order_total == Decimal("10.00")
