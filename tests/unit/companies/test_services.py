"""Unit tests for CompanyService."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.companies.dtos import CompanyDTO, UpdateCompanyDTO
from modules.companies.exceptions import CompanyNotFound
from modules.companies.models import Company
from modules.companies.services import CompanyService

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda company: company
    return repo


@pytest.fixture()
def service(mock_repo):
    return CompanyService(repository=mock_repo)


class TestCreateCompany:
    def test_success(self, service, mock_repo):
        company = service.create_company(
            CompanyDTO(name=" Tech Solution ", city="Tech City", state="IL")
        )

        assert company.name == "Tech Solution"
        assert company.city == "Tech City"
        mock_repo.save.assert_called_once()

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            CompanyDTO(name="  ")


class TestUpdateCompany:
    def test_only_supplied_fields_change(self, service, mock_repo):
        existing = Company(name="Old", city="Springfield", phone_number="123")
        mock_repo.get_by_id.return_value = existing

        company = service.update_company(str(existing.id), UpdateCompanyDTO(city="Shelbyville"))

        assert company.city == "Shelbyville"
        assert company.name == "Old"
        assert company.phone_number == "123"

    def test_not_found(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None
        with pytest.raises(CompanyNotFound):
            service.update_company(str(uuid4()), UpdateCompanyDTO(name="X"))


class TestDeleteCompany:
    def test_success(self, service, mock_repo):
        mock_repo.delete.return_value = True
        service.delete_company("some-id")
        mock_repo.delete.assert_called_once_with("some-id")

    def test_not_found(self, service, mock_repo):
        mock_repo.delete.return_value = False
        with pytest.raises(CompanyNotFound):
            service.delete_company("some-id")


def test_get_company_not_found(service, mock_repo):
    mock_repo.get_by_id.return_value = None
    with pytest.raises(CompanyNotFound):
        service.get_company(str(uuid4()))
