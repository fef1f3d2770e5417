"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from catalog.application.dto import ProductDTO, SortOrder
from catalog.domain.exceptions import DomainException
from catalog.infrastructure.bootstrap import catalog_manager
from catalog.infrastructure.config import Settings


def _display_table(products: list[ProductDTO]) -> None:
    """Shared formatting for listing products."""
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<32} {'Code':<12} {'Title':<24} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 88)
    for p in products:
        click.echo(
            f"{p.id:<32} {p.code:<12} {p.title:<24} {p.display_price:>10} {p.stock:>6}"
        )


def _display_product(p: ProductDTO) -> None:
    click.echo(f"Product {p.id}")
    click.echo(f"  Title:       {p.title}")
    click.echo(f"  Description: {p.description}")
    click.echo(f"  Price:       {p.display_price}")
    click.echo(f"  Thumbnail:   {p.thumbnail}")
    click.echo(f"  Code:        {p.code}")
    click.echo(f"  Stock:       {p.stock}")


@click.command("add")
@click.option("--title", required=True, help="Product title.")
@click.option("--description", default="", help="Product description.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--thumbnail", default="", help="Image URL.")
@click.option("--code", required=True, help="Unique product code.")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.pass_obj
def product_add(
    settings: Settings,
    title: str,
    description: str,
    price: str,
    thumbnail: str,
    code: str,
    stock: int,
) -> None:
    """Add a new product to the catalog."""
    try:
        product = catalog_manager(settings).create(
            title=title,
            description=description,
            price=price,
            thumbnail=thumbnail,
            code=code,
            stock=stock,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.title}' added at {product.display_price}")


@click.command("list")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Show only the first N products.")
@click.pass_obj
def product_list(settings: Settings, limit: int | None) -> None:
    """List products in catalog order."""
    _display_table(catalog_manager(settings).list_products(limit))


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(settings: Settings, product_id: str) -> None:
    """Show one product."""
    try:
        product = catalog_manager(settings).get_by_id(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(product)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--title", default=None, help="New title.")
@click.option("--description", default=None, help="New description.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--thumbnail", default=None, help="New image URL.")
@click.option("--code", default=None, help="New product code.")
@click.option("--stock", default=None, type=int, help="New stock level.")
@click.pass_obj
def product_update(settings: Settings, product_id: str, **fields: object) -> None:
    """Change one or more fields of a product."""
    changes = {name: value for name, value in fields.items() if value is not None}
    if not changes:
        raise click.UsageError("Nothing to update: pass at least one field option.")

    try:
        product = catalog_manager(settings).update(product_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} updated ({', '.join(sorted(changes))})")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(settings: Settings, product_id: str) -> None:
    """Remove a product from the catalog."""
    try:
        catalog_manager(settings).delete(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")


@click.command("search")
@click.argument("query", default="")
@click.pass_obj
def product_search(settings: Settings, query: str) -> None:
    """Find products whose title or description contains QUERY."""
    _display_table(catalog_manager(settings).search(query))


@click.command("sort")
@click.option(
    "--order",
    type=click.Choice([o.value for o in SortOrder]),
    default=SortOrder.ASCENDING.value,
    show_default=True,
    help="Price order.",
)
@click.pass_obj
def product_sort(settings: Settings, order: str) -> None:
    """List products ordered by price."""
    _display_table(catalog_manager(settings).sort_by_price(order))
