"""User administration use cases: listing, role management, lockout.

Business rules:
- Moving a user to the Company role links the chosen company; moving
  away from it clears the link.
- Keeping the Company role with another company only moves the link.
- Lock/unlock toggles ``lockout_end``: a future value is reset to now,
  anything else becomes now + ``LOCKOUT_DURATION``.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import structlog
from django.utils import timezone

from modules.accounts.dtos import LockResultDTO, RoleManagementDTO
from modules.accounts.exceptions import CompanyRequired, InvalidRole, UserNotFound
from modules.core.constants import Role

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.dtos import RoleChangeDTO
    from modules.accounts.models import ApplicationUser
    from modules.core.unit_of_work import IUnitOfWork

logger = structlog.get_logger(__name__)

LOCKOUT_DURATION = timedelta(days=365 * 1000)


class UserService:
    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_users(self) -> QuerySet:
        return self._uow.users.list_with_company()

    def get_user(self, user_id: str) -> ApplicationUser:
        user = self._uow.users.get_by_id(user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found.")
        return user

    def get_role_management(self, user_id: str) -> RoleManagementDTO:
        user = self.get_user(user_id)
        return RoleManagementDTO.from_entities(
            user,
            roles=Role.values,
            companies=self._uow.companies.list().order_by("name"),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def change_role(self, user_id: str, dto: RoleChangeDTO) -> ApplicationUser:
        """Swap the user's role group, keeping the company link consistent.

        Raises:
            InvalidRole: the requested role is unknown.
            UserNotFound: the user does not exist.
            CompanyRequired: Company role without an existing company.
        """
        if dto.role not in Role.values:
            raise InvalidRole(f"Unknown role '{dto.role}'.")

        with self._uow.atomic():
            user = self.get_user(user_id)
            old_role = user.role
            log = logger.bind(user_id=str(user.pk), old_role=old_role, new_role=dto.role)

            company = None
            if dto.role == Role.COMPANY:
                if dto.company_id is not None:
                    company = self._uow.companies.get_by_id(dto.company_id)
                if company is None:
                    log.warning("user.role_change_missing_company")
                    raise CompanyRequired("Company role requires an existing company.")

            if dto.role != old_role:
                if dto.role == Role.COMPANY:
                    user.company = company
                if old_role == Role.COMPANY:
                    user.company = None
                self._uow.users.save(user)
                self._uow.users.set_role(user, dto.role)
                log.info("user.role_changed")
            elif old_role == Role.COMPANY and user.company_id != company.id:
                user.company = company
                self._uow.users.save(user)
                log.info("user.company_changed", company_id=str(company.id))

        return user

    def lock_unlock(self, user_id: str) -> LockResultDTO:
        """Toggle the user's lockout.

        Raises:
            UserNotFound: the user does not exist.
        """
        user = self.get_user(user_id)
        now = timezone.now()
        if user.lockout_end is not None and user.lockout_end > now:
            lockout_end = now
        else:
            lockout_end = now + LOCKOUT_DURATION

        with self._uow.atomic():
            self._uow.users.update_lockout(user_id, lockout_end)

        locked = lockout_end > now
        logger.info("user.lockout_toggled", user_id=str(user.pk), locked=locked)
        return LockResultDTO(user_id=user.pk, locked=locked, lockout_end=lockout_end)
