"""Company service layer (Use Cases)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.companies.dtos import ADDRESS_FIELDS
from modules.companies.exceptions import CompanyNotFound
from modules.companies.models import Company

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.companies.dtos import CompanyDTO, UpdateCompanyDTO
    from modules.companies.repositories.interfaces import ICompanyRepository

logger = structlog.get_logger(__name__)


class CompanyService:
    """Application service for Company use-cases.

    Receives an ``ICompanyRepository`` via constructor injection.
    """

    def __init__(self, repository: ICompanyRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_company(self, dto: CompanyDTO) -> Company:
        company = Company(**dto.model_dump())
        company = self._repo.save(company)
        logger.info("company.created", company_id=str(company.id))
        return company

    @transaction.atomic
    def update_company(self, id: str, dto: UpdateCompanyDTO) -> Company:
        """Apply the supplied fields to an existing company.

        Raises:
            CompanyNotFound: if the company does not exist.
        """
        company = self._repo.get_by_id(id)
        if not company:
            raise CompanyNotFound(f"Company {id} not found.")

        for field in ("name", *ADDRESS_FIELDS):
            value = getattr(dto, field)
            if value is not None:
                setattr(company, field, value)

        company = self._repo.save(company)
        logger.info("company.updated", company_id=str(id))
        return company

    def list_companies(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        return self._repo.list(filters)

    def get_company(self, id: str) -> Company:
        company = self._repo.get_by_id(id)
        if not company:
            raise CompanyNotFound(f"Company {id} not found.")
        return company

    @transaction.atomic
    def delete_company(self, id: str) -> None:
        """Soft-delete a company.

        Raises:
            CompanyNotFound: if the company does not exist.
        """
        if not self._repo.delete(id):
            logger.warning("company.delete_aborted", company_id=str(id))
            raise CompanyNotFound(f"Company {id} not found.")
        logger.info("company.soft_deleted", company_id=str(id))
