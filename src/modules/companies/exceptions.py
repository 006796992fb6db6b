"""Company domain exceptions."""

from __future__ import annotations


class CompanyNotFound(Exception):
    """The requested company does not exist or has been soft-deleted."""
