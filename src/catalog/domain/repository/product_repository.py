"""Abstract repository for the product catalog.

Defined in the domain layer so the domain never depends on
infrastructure. The catalog is always read and written as a whole:
there is no per-record access at this seam.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def load(self) -> list[Product] | None:
        """Return every stored product in order, or None if the store
        is missing or cannot be decoded."""

    @abstractmethod
    def save(self, products: list[Product]) -> bool:
        """Replace the stored catalog with ``products``.

        Returns False if the write failed. Implementations log the
        failure instead of raising.
        """
