"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from catalog.application.catalog_manager import CatalogManager
from catalog.infrastructure.config import Settings
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def product_repository(settings: Settings) -> JsonProductRepository:
    return JsonProductRepository(settings.data_file)


def catalog_manager(settings: Settings) -> CatalogManager:
    return CatalogManager(product_repo=product_repository(settings))
