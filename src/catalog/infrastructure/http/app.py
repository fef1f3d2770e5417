"""FastAPI request layer over the catalog manager.

Domain errors become JSON error bodies here; nothing below this module
knows about HTTP.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.application.catalog_manager import CatalogManager
from catalog.application.dto import SortOrder
from catalog.domain.exceptions import DuplicateCodeError, NotFoundError, ValidationError
from catalog.infrastructure.config import Settings
from catalog.infrastructure.http.schemas import ErrorOut, ProductIn, ProductOut, ProductPatch

logger = logging.getLogger(__name__)


def get_manager(request: Request) -> CatalogManager:
    return request.app.state.manager


def require_ready(request: Request, manager: CatalogManager = Depends(get_manager)) -> None:
    """Refuse catalog reads until the catalog holds the configured minimum."""
    if manager.count() < request.app.state.settings.min_products:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Not enough products in the catalog",
        )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(manager: CatalogManager, settings: Settings) -> FastAPI:
    app = FastAPI(title="Product Catalog")
    app.state.manager = manager
    app.state.settings = settings

    _register_error_handlers(app)
    _register_routes(app)
    return app


def app_factory() -> FastAPI:
    """Build the app from environment settings (``uvicorn --factory``)."""
    from catalog.infrastructure.bootstrap import catalog_manager
    from catalog.infrastructure.logging_config import configure_logging

    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_file)
    return create_app(catalog_manager(settings), settings)


# --- Routes -------------------------------------------------------------------


def _register_routes(app: FastAPI) -> None:
    ready = [Depends(require_ready)]
    errors = {404: {"model": ErrorOut}, 409: {"model": ErrorOut}, 503: {"model": ErrorOut}}

    @app.get("/health")
    def health(manager: CatalogManager = Depends(get_manager)) -> dict:
        return {"status": "ok", "products": manager.count()}

    @app.get("/products", response_model=list[ProductOut], dependencies=ready, responses=errors)
    def list_products(
        limit: Optional[int] = Query(default=None, ge=1),
        manager: CatalogManager = Depends(get_manager),
    ):
        return manager.list_products(limit)

    @app.get(
        "/products/search", response_model=list[ProductOut], dependencies=ready, responses=errors
    )
    def search_products(
        q: str = Query(default=""),
        manager: CatalogManager = Depends(get_manager),
    ):
        return manager.search(q)

    @app.get(
        "/products/sorted", response_model=list[ProductOut], dependencies=ready, responses=errors
    )
    def sort_products(
        order: SortOrder = Query(default=SortOrder.ASCENDING),
        manager: CatalogManager = Depends(get_manager),
    ):
        return manager.sort_by_price(order)

    @app.get(
        "/products/{product_id}", response_model=ProductOut, dependencies=ready, responses=errors
    )
    def get_product(product_id: str, manager: CatalogManager = Depends(get_manager)):
        return manager.get_by_id(product_id)

    @app.post(
        "/products",
        response_model=ProductOut,
        status_code=status.HTTP_201_CREATED,
        responses=errors,
    )
    def create_product(body: ProductIn, manager: CatalogManager = Depends(get_manager)):
        return manager.create(**body.model_dump())

    @app.put("/products/{product_id}", response_model=ProductOut, responses=errors)
    def update_product(
        product_id: str,
        body: ProductPatch,
        manager: CatalogManager = Depends(get_manager),
    ):
        return manager.update(product_id, body.model_dump(exclude_unset=True))

    @app.delete(
        "/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT, responses=errors
    )
    def delete_product(product_id: str, manager: CatalogManager = Depends(get_manager)):
        manager.delete(product_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Error mapping ------------------------------------------------------------


def _register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(DuplicateCodeError)
    async def duplicate_code_handler(request: Request, exc: DuplicateCodeError):
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return _error(422, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return _error(422, message or "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Starlette raises a bare 404 for paths that match no route.
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error(exc.status_code, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error for %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
