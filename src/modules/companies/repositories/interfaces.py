"""Company repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.companies.models import Company


class ICompanyRepository(IRepository["Company"]):
    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Company]:
        """Case-insensitive look-up by company name."""
