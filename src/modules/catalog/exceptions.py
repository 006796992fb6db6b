"""Catalog domain exceptions.

Raised by the Service Layer; the API layer translates them into HTTP
responses.
"""

from __future__ import annotations


class CategoryNotFound(Exception):
    """The requested category does not exist or has been soft-deleted."""


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class InvalidImagePath(Exception):
    """A stored image path points outside the product image directory."""
