import dataclasses
from pathlib import Path

import click

from catalog.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_search,
    product_show,
    product_sort,
    product_update,
)
from catalog.infrastructure.cli.server_commands import serve
from catalog.infrastructure.config import Settings


@click.group()
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog JSON file (overrides CATALOG_DATA_FILE).",
)
@click.pass_context
def cli(ctx: click.Context, data_file: Path | None) -> None:
    """Product Catalog"""
    settings = Settings.from_env()
    if data_file is not None:
        settings = dataclasses.replace(settings, data_file=data_file)
    ctx.obj = settings


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_search)
product.add_command(product_show)
product.add_command(product_sort)
product.add_command(product_update)
cli.add_command(serve)
