"""Catalog DTOs for the Service Layer.

Framework-agnostic, immutable (``frozen=True``) Pydantic v2 models.

- ``CategoryDTO``: category create/update input.
- ``ProductDTO``: product upsert input (the image file travels separately).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.catalog.constants import (
    CATEGORY_NAME_MAX_LENGTH,
    DISPLAY_ORDER_MAX,
    DISPLAY_ORDER_MIN,
    PRICE_MAX,
    PRICE_MIN,
)


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------


class CategoryDTO(BaseModel):
    """Validates:

    - ``name`` is non-blank and at most 30 characters.
    - ``display_order`` lies within 1..100.
    - ``name`` is not the display order written out as text.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(max_length=CATEGORY_NAME_MAX_LENGTH)
    display_order: int = Field(ge=DISPLAY_ORDER_MIN, le=DISPLAY_ORDER_MAX)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Category name is required.")
        return v

    @model_validator(mode="after")
    def name_differs_from_display_order(self) -> Self:
        if self.name == str(self.display_order):
            raise ValueError("The Display Order cannot exactly match the Name.")
        return self


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

Price = Annotated[
    Decimal, Field(ge=PRICE_MIN, le=PRICE_MAX, max_digits=10, decimal_places=2)
]


class ProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    isbn: str = Field(min_length=1, max_length=20)
    author: str = Field(min_length=1, max_length=255)
    list_price: Price
    price: Price
    price50: Price
    price100: Price
    category_id: UUID
