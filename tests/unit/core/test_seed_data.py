"""Tests for the ``seed_data`` management command."""

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command

from modules.catalog.models import Category, Product
from modules.companies.models import Company
from modules.core.constants import Role
from modules.core.management.commands.seed_data import DEFAULT_ADMIN_USERNAME

pytestmark = pytest.mark.unit

User = get_user_model()


def _seed() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


def test_seeds_everything_once():
    output = _seed()

    assert "Seed completed" in output
    assert set(Group.objects.values_list("name", flat=True)) == set(Role.values)
    assert Category.objects.count() == 3
    assert Company.objects.count() == 3
    assert Product.objects.count() == 6
    admin = User.objects.get(username=DEFAULT_ADMIN_USERNAME)
    assert admin.role == Role.ADMIN


def test_second_run_is_idempotent():
    _seed()
    _seed()

    assert Group.objects.count() == len(Role.values)
    assert Category.objects.count() == 3
    assert Product.objects.count() == 6
    assert User.objects.filter(username=DEFAULT_ADMIN_USERNAME).count() == 1


def test_admin_only_created_with_the_roles(roles):
    _seed()
    assert not User.objects.filter(username=DEFAULT_ADMIN_USERNAME).exists()
    assert Product.objects.count() == 6
