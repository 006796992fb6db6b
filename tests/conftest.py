from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.catalog.models import Category, Product
from modules.companies.models import Company
from modules.core.constants import Role
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.models import OrderDetail, OrderHeader
from modules.payments.gateway import reset_gateway, set_gateway
from modules.payments.gateway.fake_adapter import FakeGateway

User = get_user_model()

SHIPPING = {
    "name": "Jane Reader",
    "phone_number": "5550001111",
    "street_address": "12 Library Lane",
    "city": "Booktown",
    "state": "IL",
    "postal_code": "60601",
}


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def fake_gateway():
    """Every test talks to a fresh in-memory payment gateway."""
    gateway = FakeGateway()
    set_gateway(gateway)
    yield gateway
    reset_gateway()


@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")


@pytest.fixture()
def shipping():
    """Checkout shipping block."""
    return dict(SHIPPING)


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and roles
# ---------------------------------------------------------------------------


@pytest.fixture()
def roles():
    return {role: Group.objects.get_or_create(name=role)[0] for role in Role.values}


def _make_user(username, role_group=None, **extra):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="Str0ng-pass!",
        **{**SHIPPING, **extra},
    )
    if role_group is not None:
        user.groups.add(role_group)
    return user


@pytest.fixture()
def company():
    return Company.objects.create(
        name="Readers Club",
        street_address="999 Main St",
        city="Lala land",
        state="NY",
        postal_code="99999",
        phone_number="1113335555",
    )


@pytest.fixture()
def customer(roles):
    return _make_user("customer", roles[Role.CUSTOMER])


@pytest.fixture()
def other_customer(roles):
    return _make_user("other_customer", roles[Role.CUSTOMER])


@pytest.fixture()
def company_user(roles, company):
    return _make_user("company_buyer", roles[Role.COMPANY], company=company)


@pytest.fixture()
def admin_user(roles):
    return _make_user("admin", roles[Role.ADMIN])


@pytest.fixture()
def employee(roles):
    return _make_user("employee", roles[Role.EMPLOYEE])


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def customer_client(customer):
    return _client_for(customer)


@pytest.fixture()
def company_client(company_user):
    return _client_for(company_user)


@pytest.fixture()
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture()
def employee_client(employee):
    return _client_for(employee)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def category():
    return Category.objects.create(name="SciFi", display_order=2)


@pytest.fixture()
def make_product(category):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        defaults = {
            "title": f"Book {counter['n']}",
            "author": "Ron Parker",
            "isbn": f"ISBN{counter['n']:06d}",
            "description": "",
            "list_price": Decimal("12.00"),
            "price": Decimal("10.00"),
            "price50": Decimal("8.00"),
            "price100": Decimal("5.00"),
            "category": category,
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _make


@pytest.fixture()
def product(make_product):
    return make_product(title="Rock in the Ocean")


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_order(product):
    """Persist an order with one detail line directly, bypassing checkout."""

    def _make(
        user,
        order_status=OrderStatus.APPROVED,
        payment_status=PaymentStatus.APPROVED,
        count=2,
        **extra,
    ):
        order = OrderHeader.objects.create(
            user=user,
            order_status=order_status,
            payment_status=payment_status,
            order_total=product.price * count,
            **{**SHIPPING, **extra},
        )
        OrderDetail.objects.create(
            order_header=order, product=product, count=count, price=product.price
        )
        return order

    return _make
