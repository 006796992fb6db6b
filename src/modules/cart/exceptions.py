"""Cart and checkout domain exceptions."""

from __future__ import annotations


class CartItemNotFound(Exception):
    """The cart line does not exist or belongs to another user."""


class EmptyCart(Exception):
    """Checkout was attempted with an empty shopping cart."""


class CartLineLimitExceeded(Exception):
    """The line's count would go over the per-line maximum."""
