"""Application user.

Extends Django's ``AbstractUser`` with the shipping profile used to
prefill orders, an optional company link (Company role) and a lockout
timestamp.  The user's role is its membership in one of the ``Role``
groups.
"""

from __future__ import annotations

import uuid6
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from modules.core.constants import Role


class ApplicationUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    name = models.CharField(max_length=150, blank=True, default="")
    street_address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    phone_number = models.CharField(max_length=30, blank=True, default="")
    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
    )
    lockout_end = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "application_users"
        ordering = ["username"]

    @property
    def role(self) -> str:
        """Name of the role group the user belongs to ("" when none)."""
        group_names = {group.name for group in self.groups.all()}
        for role in Role.values:
            if role in group_names:
                return role
        return ""

    @property
    def is_locked_out(self) -> bool:
        return self.lockout_end is not None and self.lockout_end > timezone.now()

    def __str__(self) -> str:
        return self.name or self.get_username()
