"""JSON-file-backed implementation of ProductRepository.

The whole catalog is one JSON array. Reads fail open (a broken or
missing file means an empty catalog) and writes are best effort (a
failed write is logged, not raised).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from catalog.domain.exceptions import DomainException, StorageReadError, StorageWriteError
from catalog.domain.model.product import Product
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)

    # --- ProductRepository interface ------------------------------------------

    def load(self) -> list[Product] | None:
        if not self._file_path.exists():
            logger.info("No catalog file at %s; starting empty", self._file_path)
            return None
        try:
            return [self._to_domain(raw) for raw in self._load_raw()]
        except StorageReadError as exc:
            logger.warning("Ignoring unreadable catalog file %s: %s", self._file_path, exc)
            return None

    def save(self, products: list[Product]) -> bool:
        try:
            self._persist_raw([self._to_raw(p) for p in products])
        except StorageWriteError as exc:
            logger.error("Could not write catalog file %s: %s", self._file_path, exc)
            return False
        logger.debug("Wrote %d product(s) to %s", len(products), self._file_path)
        return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "title": product.title,
            "description": product.description,
            "price": product.price.to_json(),
            "thumbnail": product.thumbnail,
            "code": product.code,
            "stock": product.stock.value,
        }

    @staticmethod
    def _to_domain(raw: object) -> Product:
        if not isinstance(raw, dict):
            raise StorageReadError(f"Expected a product object, got {type(raw).__name__}")
        try:
            return Product.create(
                product_id=str(raw["id"]),
                title=raw["title"],
                description=raw.get("description", ""),
                price=raw["price"],
                thumbnail=raw.get("thumbnail", ""),
                code=raw["code"],
                stock=raw.get("stock", 0),
            )
        except KeyError as exc:
            raise StorageReadError(f"Product record is missing field {exc}") from exc
        except DomainException as exc:
            raise StorageReadError(f"Invalid product record: {exc}") from exc

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list:
        try:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageReadError(str(exc)) from exc
        if not isinstance(records, list):
            raise StorageReadError(f"Expected a JSON array, got {type(records).__name__}")
        return records

    def _persist_raw(self, records: list[dict]) -> None:
        """Write to a sibling temp file, then rename it over the target."""
        try:
            payload = json.dumps(records, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
        except ValueError as exc:
            raise StorageWriteError(f"Catalog is not representable as JSON: {exc}") from exc
        tmp_name = None
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self._file_path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageWriteError(str(exc)) from exc
