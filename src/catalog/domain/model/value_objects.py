"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from catalog.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """A non-negative price.

    Uses Decimal so that prices read back from the store compare equal
    to the ones that were written.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Ordering -------------------------------------------------------------

    def __lt__(self, other: Money) -> bool:
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def to_json(self) -> int | float | str:
        """JSON value that reads back as the same amount.

        Whole amounts are ints and short decimals are floats. Anything a
        float would round is written as its exact decimal string.
        """
        as_float = float(self.amount)
        if Decimal(repr(as_float)) == self.amount:
            return int(as_float) if as_float.is_integer() else as_float
        return str(self.amount)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            return Money(Decimal(str(amount).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Stock:
    """Units on hand. Zero is allowed, negative counts are not."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Stock must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise ValidationError("Stock cannot be negative")

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(value: int | str) -> Stock:
        """Accept ints and integer strings such as "12"."""
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError as exc:
                raise ValidationError(f"Invalid stock: {value!r}") from exc
        return Stock(value)
