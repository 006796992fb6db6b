"""Django ORM implementation of the application user repository.

Roles live in ``django.contrib.auth`` groups; ``set_role`` keeps exactly
one role group per user and creates the group on first use.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import structlog
from django.contrib.auth.models import Group
from django.db import transaction
from django.db.models import QuerySet

from modules.accounts.models import ApplicationUser
from modules.accounts.repositories.interfaces import IApplicationUserRepository
from modules.core.constants import Role
from modules.core.repositories.django_repository import DjangoRepository

logger = structlog.get_logger(__name__)


class ApplicationUserDjangoRepository(
    DjangoRepository[ApplicationUser], IApplicationUserRepository
):
    model = ApplicationUser
    select_related = ("company",)

    def list_with_company(self) -> QuerySet:
        return self._queryset().prefetch_related("groups").order_by("username")

    @transaction.atomic
    def set_role(self, user: ApplicationUser, role: str) -> None:
        role_group, _ = Group.objects.get_or_create(name=role)
        stale = user.groups.filter(name__in=Role.values).exclude(pk=role_group.pk)
        user.groups.remove(*stale)
        user.groups.add(role_group)
        logger.info("user.role_set", user_id=str(user.pk), role=role)

    @transaction.atomic
    def update_lockout(self, user_id: str, lockout_end: Optional[datetime]) -> bool:
        user = self.get_by_id(user_id)
        if not user:
            return False
        user.lockout_end = lockout_end
        user.save(update_fields=["lockout_end"])
        return True
