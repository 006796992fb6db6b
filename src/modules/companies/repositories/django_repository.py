"""Django ORM implementation of the Company repository."""

from __future__ import annotations

from typing import Optional

from modules.companies.models import Company
from modules.companies.repositories.interfaces import ICompanyRepository
from modules.core.repositories.django_repository import DjangoRepository


class CompanyDjangoRepository(DjangoRepository[Company], ICompanyRepository):
    model = Company

    def get_by_name(self, name: str) -> Optional[Company]:
        return self.get(name__iexact=name)
