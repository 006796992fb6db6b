"""Cart DTOs.

- ``AddToCartDTO``: input of "add to cart".
- ``CartLineDTO`` / ``CartDTO``: the cart with tier prices and total.
- ``CartSummaryDTO``: the cart plus the shipping draft for checkout.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Iterable, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from modules.cart.models import ShoppingCart

MAX_LINE_COUNT = 1000


class AddToCartDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    count: int = Field(default=1, ge=1, le=MAX_LINE_COUNT)


class CartLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    title: str
    author: str
    isbn: str
    image_url: str
    list_price: Decimal
    count: int
    price: Decimal
    subtotal: Decimal

    @classmethod
    def from_entity(cls, line: ShoppingCart) -> "CartLineDTO":
        product = line.product
        return cls(
            id=line.id,
            product_id=product.id,
            title=product.title,
            author=product.author,
            isbn=product.isbn,
            image_url=product.image_url,
            list_price=product.list_price,
            count=line.count,
            price=line.price,
            subtotal=line.subtotal,
        )


class CartDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: List[CartLineDTO]
    order_total: Decimal
    item_count: int

    @classmethod
    def from_entities(cls, lines: Iterable[ShoppingCart]) -> "CartDTO":
        line_dtos = [CartLineDTO.from_entity(line) for line in lines]
        return cls(
            lines=line_dtos,
            order_total=sum((line.subtotal for line in line_dtos), Decimal("0.00")),
            item_count=len(line_dtos),
        )


class CartSummaryDTO(CartDTO):
    shipping: Dict[str, str]
