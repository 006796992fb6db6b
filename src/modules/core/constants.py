"""Static details shared across modules.

Role names double as Django ``Group`` names: a user's role is the role
group it belongs to.
"""

from django.db import models


class Role(models.TextChoices):
    CUSTOMER = "Customer", "Customer"
    COMPANY = "Company", "Company"
    ADMIN = "Admin", "Admin"
    EMPLOYEE = "Employee", "Employee"


STAFF_ROLES: frozenset[str] = frozenset({Role.ADMIN, Role.EMPLOYEE})
