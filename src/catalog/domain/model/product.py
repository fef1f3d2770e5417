"""Product entity.

A product is created once with a generated ID and then edited field by
field. The ID is the identity of the record and never changes.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.value_objects import Money, Stock

# Fields a caller may set on create or change on update, in storage order.
EDITABLE_FIELDS = ("title", "description", "price", "thumbnail", "code", "stock")


def new_product_id() -> str:
    """Return a random 128-bit identifier as 32 hex characters.

    uuid4 carries 122 random bits, so the chance of any collision among
    n IDs is roughly n**2 / 2**123.
    """
    return uuid.uuid4().hex


@dataclass
class Product:
    """A product in the catalog.

    Mutable because updates are applied in place; the catalog manager
    is the only holder of live instances.
    """

    id: str
    title: str
    description: str
    price: Money
    thumbnail: str
    code: str
    stock: Stock

    @classmethod
    def create(
        cls,
        product_id: str,
        title: str,
        description: str,
        price: str | float | int | Decimal | Money,
        thumbnail: str,
        code: str,
        stock: int | str | Stock,
    ) -> Product:
        """Build a validated product."""
        values = _coerce_fields(
            {
                "title": title,
                "description": description,
                "price": price,
                "thumbnail": thumbnail,
                "code": code,
                "stock": stock,
            }
        )
        return cls(id=product_id, **values)

    def apply_changes(self, changes: Mapping[str, object]) -> None:
        """Merge a partial set of field values into this product.

        Every value is validated before anything is assigned, so a
        rejected change leaves the product untouched. An ``id`` key is
        dropped.
        """
        fields = {k: v for k, v in changes.items() if k != "id"}
        unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown product field(s): {', '.join(unknown)}")

        for name, value in _coerce_fields(fields).items():
            setattr(self, name, value)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or description."""
        needle = query.casefold()
        return needle in self.title.casefold() or needle in self.description.casefold()


def _coerce_fields(fields: Mapping[str, object]) -> dict[str, object]:
    """Validate raw field values and convert them to domain types."""
    result: dict[str, object] = {}
    for name, value in fields.items():
        if name == "price":
            result[name] = value if isinstance(value, Money) else Money.of(value)
        elif name == "stock":
            result[name] = value if isinstance(value, Stock) else Stock.of(value)
        else:
            if not isinstance(value, str):
                raise ValidationError(
                    f"Product {name} must be a string, got {type(value).__name__}"
                )
            if name in ("title", "code") and not value.strip():
                raise ValidationError(f"Product {name} is required")
            result[name] = value
    return result
