"""CLI command that runs the HTTP API."""

from __future__ import annotations

import click
import uvicorn

from catalog.infrastructure.bootstrap import catalog_manager
from catalog.infrastructure.config import Settings
from catalog.infrastructure.http.app import create_app
from catalog.infrastructure.logging_config import configure_logging


@click.command("serve")
@click.option("--host", default=None, help="Bind address (default from CATALOG_HOST).")
@click.option("--port", default=None, type=int, help="Port (default from CATALOG_PORT).")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None) -> None:
    """Serve the catalog over HTTP."""
    configure_logging(settings.log_level, settings.log_file)
    app = create_app(catalog_manager(settings), settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )
