"""Database constraints on cart lines."""

from __future__ import annotations

import pytest
from django.db import IntegrityError, transaction

from modules.cart.models import ShoppingCart

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("count", [0, -3])
def test_count_must_be_positive(customer, product, count):
    with pytest.raises(IntegrityError), transaction.atomic():
        ShoppingCart.objects.create(user=customer, product=product, count=count)


def test_one_line_is_accepted(customer, product):
    line = ShoppingCart.objects.create(user=customer, product=product, count=1)
    assert line.count == 1
