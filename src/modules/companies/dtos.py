"""Company DTOs for the Service Layer (Pydantic v2, immutable).

- ``CompanyDTO``: input for company creation.
- ``UpdateCompanyDTO``: partial update, only supplied fields change.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

ADDRESS_FIELDS = ("street_address", "city", "state", "postal_code", "phone_number")


class CompanyDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    street_address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    phone_number: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Company name is required.")
        return v


class UpdateCompanyDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    phone_number: str | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is not None and not v:
            raise ValueError("Company name is required.")
        return v
