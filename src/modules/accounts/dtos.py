"""Account DTOs for the Service Layer (Pydantic v2, immutable).

- ``RoleChangeDTO``: input of the role management screen.
- ``RoleManagementDTO``: user plus the role and company choices.
- ``LockResultDTO``: outcome of a lock/unlock toggle.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from modules.accounts.models import ApplicationUser
    from modules.companies.models import Company


class RoleChangeDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    company_id: Optional[UUID] = None

    @field_validator("role")
    @classmethod
    def role_must_not_be_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Role is required.")
        return v


class CompanyOptionDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str


class RoleManagementDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    username: str
    name: str
    role: str
    company_id: Optional[UUID]
    roles: List[str]
    companies: List[CompanyOptionDTO]

    @classmethod
    def from_entities(
        cls,
        user: ApplicationUser,
        roles: Iterable[str],
        companies: Iterable[Company],
    ) -> RoleManagementDTO:
        return cls(
            user_id=user.id,
            username=user.username,
            name=user.name,
            role=user.role,
            company_id=user.company_id,
            roles=list(roles),
            companies=[
                CompanyOptionDTO(id=company.id, name=company.name)
                for company in companies
            ],
        )


class LockResultDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    locked: bool
    lockout_end: Optional[datetime]
