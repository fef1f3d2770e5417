"""Application service: the in-memory product catalog.

The manager owns every live Product, enforces the ID and code
invariants, and rewrites the whole backing store after each successful
mutation. Callers only ever receive ProductDTO snapshots.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from decimal import Decimal

from catalog.application.dto import ProductDTO, SortOrder
from catalog.domain.exceptions import DuplicateCodeError, NotFoundError, ValidationError
from catalog.domain.model.product import Product, new_product_id
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CatalogManager:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        # One lock for reads and writes: a read never sees half a mutation.
        self._lock = threading.RLock()
        self._products: list[Product] = self._initial_products()
        logger.info("Catalog loaded with %d product(s)", len(self._products))

    # --- Queries --------------------------------------------------------------

    def list_products(self, limit: int | None = None) -> list[ProductDTO]:
        """Return products in insertion order, optionally only the first ``limit``."""
        if limit is not None and limit < 1:
            raise ValidationError(f"Limit must be a positive integer, got {limit}")
        with self._lock:
            products = self._products if limit is None else self._products[:limit]
            return [ProductDTO.from_product(p) for p in products]

    def count(self) -> int:
        with self._lock:
            return len(self._products)

    def get_by_id(self, product_id: str) -> ProductDTO:
        with self._lock:
            return ProductDTO.from_product(self._find(product_id))

    def search(self, query: str) -> list[ProductDTO]:
        """Products whose title or description contains ``query``, ignoring case."""
        with self._lock:
            return [ProductDTO.from_product(p) for p in self._products if p.matches(query)]

    def sort_by_price(self, order: SortOrder | str = SortOrder.ASCENDING) -> list[ProductDTO]:
        """Return products ordered by price without touching the catalog order.

        sorted() is stable in both directions, so equal prices keep
        their insertion order.
        """
        try:
            order = SortOrder(order)
        except ValueError as exc:
            raise ValidationError(f"Sort order must be 'asc' or 'desc', got {order!r}") from exc

        with self._lock:
            ordered = sorted(
                self._products,
                key=lambda p: p.price,
                reverse=order is SortOrder.DESCENDING,
            )
            return [ProductDTO.from_product(p) for p in ordered]

    # --- Mutations ------------------------------------------------------------

    def create(
        self,
        title: str,
        description: str,
        price: str | float | int | Decimal,
        thumbnail: str,
        code: str,
        stock: int | str,
    ) -> ProductDTO:
        """Add a new product with a freshly generated ID."""
        with self._lock:
            if self._find_by_code(code) is not None:
                raise DuplicateCodeError(f"Product code '{code}' is already in use")

            product = Product.create(
                product_id=self._next_id(),
                title=title,
                description=description,
                price=price,
                thumbnail=thumbnail,
                code=code,
                stock=stock,
            )
            self._products.append(product)
            self._persist()
            logger.info("Created product %s (code=%s)", product.id, product.code)
            return ProductDTO.from_product(product)

    def update(self, product_id: str, changes: Mapping[str, object]) -> ProductDTO:
        """Merge ``changes`` into an existing product.

        The ID is never overwritten. A new code must not belong to any
        other product.
        """
        with self._lock:
            product = self._find(product_id)

            new_code = changes.get("code")
            if new_code is not None and new_code != product.code:
                holder = self._find_by_code(new_code)
                if holder is not None:
                    raise DuplicateCodeError(f"Product code '{new_code}' is already in use")

            product.apply_changes(changes)
            self._persist()
            logger.info("Updated product %s", product.id)
            return ProductDTO.from_product(product)

    def delete(self, product_id: str) -> None:
        with self._lock:
            product = self._find(product_id)
            self._products.remove(product)
            self._persist()
            logger.info("Deleted product %s (code=%s)", product.id, product.code)

    # --- Internal helpers -----------------------------------------------------

    def _find(self, product_id: str) -> Product:
        for product in self._products:
            if product.id == product_id:
                return product
        raise NotFoundError(f"Product with ID '{product_id}' not found")

    def _find_by_code(self, code: object) -> Product | None:
        for product in self._products:
            if product.code == code:
                return product
        return None

    def _next_id(self) -> str:
        live = {p.id for p in self._products}
        product_id = new_product_id()
        while product_id in live:
            product_id = new_product_id()
        return product_id

    def _persist(self) -> None:
        if not self._product_repo.save(list(self._products)):
            logger.warning(
                "Backing store is behind the in-memory catalog; "
                "it will be rewritten on the next change"
            )

    def _initial_products(self) -> list[Product]:
        loaded = self._product_repo.load()
        if loaded is None:
            return []

        seen: set[str] = set()
        products: list[Product] = []
        for product in loaded:
            if product.id in seen:
                logger.warning("Skipping stored product with duplicate ID %s", product.id)
                continue
            seen.add(product.id)
            products.append(product)
        return products
