"""Application user repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.models import ApplicationUser


class IApplicationUserRepository(IRepository["ApplicationUser"]):
    @abstractmethod
    def list_with_company(self) -> QuerySet:
        """Users with company and role groups eager loaded."""

    @abstractmethod
    def set_role(self, user: ApplicationUser, role: str) -> None:
        """Replace the user's role group with *role*."""

    @abstractmethod
    def update_lockout(self, user_id: str, lockout_end: Optional[datetime]) -> bool:
        """Set ``lockout_end``; returns ``False`` for an unknown user."""
