"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The order does not exist or belongs to another customer."""


class InvalidOrderStatus(Exception):
    """The order's current status does not allow the requested action."""


class OrderDeletionNotAllowed(Exception):
    """Orders are cancelled, never deleted."""
