"""Unit tests for UserService (role management and lockout).

Runs against the Django unit of work: roles are group memberships, so
the interesting behaviour lives in the database.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.accounts.dtos import RoleChangeDTO
from modules.accounts.exceptions import CompanyRequired, InvalidRole, UserNotFound
from modules.accounts.services import LOCKOUT_DURATION, UserService
from modules.companies.models import Company
from modules.core.constants import Role
from modules.core.unit_of_work import DjangoUnitOfWork

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return UserService(uow=DjangoUnitOfWork())


@pytest.fixture()
def other_company():
    return Company.objects.create(name="Vivid Books")


# ==== change_role


class TestChangeRole:
    def test_customer_to_employee(self, service, customer):
        user = service.change_role(str(customer.pk), RoleChangeDTO(role=Role.EMPLOYEE))

        assert user.role == Role.EMPLOYEE
        assert list(customer.groups.values_list("name", flat=True)) == [Role.EMPLOYEE]
        assert user.company_id is None

    def test_customer_to_company_links_company(self, service, customer, company):
        user = service.change_role(
            str(customer.pk), RoleChangeDTO(role=Role.COMPANY, company_id=company.id)
        )

        customer.refresh_from_db()
        assert customer.role == Role.COMPANY
        assert customer.company_id == company.id
        assert user.company_id == company.id

    def test_company_to_customer_clears_company(self, service, company_user):
        service.change_role(str(company_user.pk), RoleChangeDTO(role=Role.CUSTOMER))

        company_user.refresh_from_db()
        assert company_user.role == Role.CUSTOMER
        assert company_user.company_id is None

    def test_company_to_other_company_moves_link(self, service, company_user, other_company):
        service.change_role(
            str(company_user.pk),
            RoleChangeDTO(role=Role.COMPANY, company_id=other_company.id),
        )

        company_user.refresh_from_db()
        assert company_user.role == Role.COMPANY
        assert company_user.company_id == other_company.id

    def test_company_role_without_company_raises(self, service, customer):
        with pytest.raises(CompanyRequired):
            service.change_role(str(customer.pk), RoleChangeDTO(role=Role.COMPANY))
        customer.refresh_from_db()
        assert customer.role == Role.CUSTOMER

    def test_company_role_with_deleted_company_raises(self, service, customer, other_company):
        other_company.delete()
        with pytest.raises(CompanyRequired):
            service.change_role(
                str(customer.pk),
                RoleChangeDTO(role=Role.COMPANY, company_id=other_company.id),
            )

    def test_unknown_role_raises(self, service, customer):
        with pytest.raises(InvalidRole):
            service.change_role(str(customer.pk), RoleChangeDTO(role="Wizard"))

    def test_unknown_user_raises(self, service, roles):
        with pytest.raises(UserNotFound):
            service.change_role(str(uuid4()), RoleChangeDTO(role=Role.ADMIN))


# ==== role management view


def test_role_management_lists_roles_and_companies(service, company_user, other_company):
    view = service.get_role_management(str(company_user.pk))

    assert view.role == Role.COMPANY
    assert view.company_id == company_user.company_id
    assert view.roles == list(Role.values)
    assert [c.name for c in view.companies] == ["Readers Club", "Vivid Books"]


# ==== lock_unlock


class TestLockUnlock:
    @freeze_time("2026-05-01 10:00:00")
    def test_unlocked_user_gets_locked(self, service, customer):
        result = service.lock_unlock(str(customer.pk))

        customer.refresh_from_db()
        assert result.locked is True
        assert customer.lockout_end == timezone.now() + LOCKOUT_DURATION
        assert customer.is_locked_out

    @freeze_time("2026-05-01 10:00:00")
    def test_locked_user_gets_unlocked(self, service, customer):
        customer.lockout_end = timezone.now() + timedelta(days=10)
        customer.save()

        result = service.lock_unlock(str(customer.pk))

        customer.refresh_from_db()
        assert result.locked is False
        assert customer.lockout_end == timezone.now()
        assert not customer.is_locked_out

    def test_expired_lockout_locks_again(self, service, customer):
        customer.lockout_end = timezone.now() - timedelta(days=1)
        customer.save()

        assert service.lock_unlock(str(customer.pk)).locked is True

    def test_unknown_user_raises(self, service):
        with pytest.raises(UserNotFound):
            service.lock_unlock(str(uuid4()))
