"""Company model.

Users holding the Company role are linked to one company and buy on
delayed-payment terms (see ``modules.cart.services``).
"""

from __future__ import annotations

from django.db import models

from modules.core.models import SoftDeleteModel


class Company(SoftDeleteModel):
    name = models.CharField(max_length=255)
    street_address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    phone_number = models.CharField(max_length=30, blank=True, default="")

    class Meta:
        db_table = "companies"
        ordering = ["name"]
        verbose_name_plural = "companies"

    def __str__(self) -> str:
        return self.name
