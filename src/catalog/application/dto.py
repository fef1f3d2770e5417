"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the HTTP/CLI layers and the catalog manager
without handing out references to live domain objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from catalog.domain.model.product import Product


class SortOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class ProductDTO:
    """Output: a snapshot of one product."""

    id: str
    title: str
    description: str
    price: Decimal
    thumbnail: str
    code: str
    stock: int

    @classmethod
    def from_product(cls, product: Product) -> ProductDTO:
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            price=product.price.amount,
            thumbnail=product.thumbnail,
            code=product.code,
            stock=product.stock.value,
        )

    @property
    def display_price(self) -> str:
        return f"${self.price:.2f}"

