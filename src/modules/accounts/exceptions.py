"""Account domain exceptions."""

from __future__ import annotations


class UserNotFound(Exception):
    """The requested user does not exist."""


class InvalidRole(Exception):
    """The role is not one of the known roles."""


class CompanyRequired(Exception):
    """The Company role needs an existing company."""
