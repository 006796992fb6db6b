"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``ShippingDetailsDTO``: name, phone and address of an order (checkout).
- ``UpdateOrderDetailsDTO``: staff correction of the shipping block plus
  optional carrier / tracking number.
- ``ShipOrderDTO``: carrier and tracking number for shipping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from modules.accounts.models import ApplicationUser

SHIPPING_FIELDS = (
    "name",
    "phone_number",
    "street_address",
    "city",
    "state",
    "postal_code",
)


class ShippingDetailsDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    phone_number: str = Field(min_length=1, max_length=30)
    street_address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)

    @classmethod
    def draft_from_user(cls, user: ApplicationUser) -> dict:
        """Shipping block prefilled from the user's profile (may be incomplete)."""
        return {field: getattr(user, field, "") or "" for field in SHIPPING_FIELDS}


class UpdateOrderDetailsDTO(ShippingDetailsDTO):
    """Empty ``carrier`` / ``tracking_number`` keep the stored values."""

    carrier: Optional[str] = Field(default=None, max_length=100)
    tracking_number: Optional[str] = Field(default=None, max_length=100)


class ShipOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    carrier: str = Field(min_length=1, max_length=100)
    tracking_number: str = Field(min_length=1, max_length=100)
