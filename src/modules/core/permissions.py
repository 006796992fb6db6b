"""Role-based DRF permissions.

Roles are Django groups named after ``Role`` values.  Superusers are
treated as administrators even without the Admin group.
"""

from __future__ import annotations

from typing import Any

from rest_framework.permissions import SAFE_METHODS, BasePermission

from modules.core.constants import STAFF_ROLES, Role


def user_has_role(user: Any, *roles: str) -> bool:
    """Return ``True`` when *user* belongs to any of *roles*."""
    if user is None or not user.is_authenticated:
        return False
    if Role.ADMIN in roles and user.is_superuser:
        return True
    return user.groups.filter(name__in=roles).exists()


def is_staff_member(user: Any) -> bool:
    """Admins and employees see every order."""
    return user_has_role(user, *STAFF_ROLES)


class IsAdmin(BasePermission):
    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        return user_has_role(request.user, Role.ADMIN)


class IsAdminOrEmployee(BasePermission):
    message = "Administrator or employee role required."

    def has_permission(self, request, view) -> bool:
        return is_staff_member(request.user)


class IsAdminOrReadOnly(BasePermission):
    """Anyone may read; only administrators may write."""

    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return True
        return user_has_role(request.user, Role.ADMIN)
