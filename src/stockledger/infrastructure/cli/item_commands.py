"""CLI commands for the Item aggregate."""

from __future__ import annotations

import click

from stockledger.application.add_item import AddItemHandler
from stockledger.application.count_stock import CountStockHandler
from stockledger.application.delete_item import DeleteItemHandler
from stockledger.application.dto import ItemDTO
from stockledger.application.show_items import ListItemsHandler, ShowItemHandler
from stockledger.application.update_item import UpdateItemHandler
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import services


def _display_item(dto: ItemDTO) -> None:
    click.echo(f"Item {dto.id}  ({dto.sku})")
    click.echo(f"Name:      {dto.name}")
    if dto.description:
        click.echo(f"About:     {dto.description}")
    click.echo(f"Quantity:  {dto.quantity}" + ("  [below reorder level]" if dto.below_reorder_level else ""))
    click.echo(f"Price:     {dto.unit_price}  (cost {dto.cost_price})")
    click.echo(f"Reorder:   at {dto.reorder_level}, order {dto.reorder_quantity}")
    click.echo(f"Category:  {dto.category_id or '-'}")
    click.echo(f"Supplier:  {dto.supplier_id or '-'}")
    click.echo(f"Location:  {dto.location or '-'}")


@click.command("add")
@click.option("--name", required=True, help="Item name.")
@click.option("--sku", required=True, help="Unique stock keeping unit.")
@click.option("--price", required=True, help="Unit selling price (e.g. 2.50).")
@click.option("--cost", default="0", show_default=True, help="Unit cost price.")
@click.option("--reorder-level", default=0, type=int, help="Flag for restock below this quantity.")
@click.option("--reorder-qty", default=0, type=int, help="Quantity to reorder.")
@click.option("--category", default=None, help="Category ID.")
@click.option("--supplier", default=None, help="Supplier ID.")
@click.option("--location", default=None, help="Storage location.")
@click.option("--description", default=None, help="Free-text description.")
@click.option("--opening-qty", default=0, type=int, help="Opening stock, booked as stock_in.")
@click.option("--user", "user_id", default=None, help="Acting user ID (needed for opening stock).")
def item_add(
    name: str,
    sku: str,
    price: str,
    cost: str,
    reorder_level: int,
    reorder_qty: int,
    category: str | None,
    supplier: str | None,
    location: str | None,
    description: str | None,
    opening_qty: int,
    user_id: str | None,
) -> None:
    """Add a new item."""
    svc = services()
    handler = AddItemHandler(engine=svc.engine)

    try:
        dto = handler.handle(
            name=name,
            sku=sku,
            unit_price=price,
            cost_price=cost,
            reorder_level=reorder_level,
            reorder_quantity=reorder_qty,
            category_id=category,
            supplier_id=supplier,
            location=location,
            description=description,
            opening_quantity=opening_qty,
            user_id=user_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {dto.id} '{dto.name}' ({dto.sku}) added with quantity {dto.quantity}")


@click.command("show")
@click.option("--id", "item_id", required=True, help="Item ID.")
def item_show(item_id: str) -> None:
    """Show one item."""
    handler = ShowItemHandler(item_repo=services().item_repo)

    try:
        dto = handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item(dto)


@click.command("list")
@click.option("--category", default=None, help="Only items in this category.")
def item_list(category: str | None) -> None:
    """List items with their on-hand quantity."""
    items = ListItemsHandler(item_repo=services().item_repo).handle(category_id=category)

    if not items:
        click.echo("No items found.")
        return

    click.echo(f"{'ID':<34} {'SKU':<14} {'Name':<24} {'Qty':>6} {'Price':>10}")
    click.echo("-" * 92)
    for dto in items:
        flag = " *" if dto.below_reorder_level else ""
        click.echo(
            f"{dto.id:<34} {dto.sku:<14} {dto.name:<24} {dto.quantity:>6} {dto.unit_price:>10}{flag}"
        )


@click.command("update")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--name", default=None)
@click.option("--sku", default=None)
@click.option("--price", default=None, help="New unit price.")
@click.option("--cost", default=None, help="New cost price.")
@click.option("--reorder-level", default=None, type=int)
@click.option("--reorder-qty", default=None, type=int)
@click.option("--category", default=None)
@click.option("--supplier", default=None)
@click.option("--location", default=None)
@click.option("--description", default=None)
def item_update(item_id: str, **options: object) -> None:
    """Update an item's details (not its quantity)."""
    names = {
        "price": "unit_price",
        "cost": "cost_price",
        "reorder_level": "reorder_level",
        "reorder_qty": "reorder_quantity",
        "category": "category_id",
        "supplier": "supplier_id",
    }
    changes = {names.get(k, k): v for k, v in options.items() if v is not None}

    handler = UpdateItemHandler(item_repo=services().item_repo)
    try:
        dto = handler.handle(item_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {dto.id} updated")


@click.command("delete")
@click.option("--id", "item_id", required=True, help="Item ID.")
def item_delete(item_id: str) -> None:
    """Delete an item that has no transactions."""
    svc = services()
    handler = DeleteItemHandler(engine=svc.engine)

    try:
        handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item_id} deleted")


@click.command("count")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--counted", required=True, type=int, help="Physically counted quantity.")
@click.option("--user", "user_id", required=True, help="Acting user ID.")
@click.option("--ref", "reference_number", default=None, help="Count sheet reference.")
@click.option("--notes", default=None)
def item_count(
    item_id: str,
    counted: int,
    user_id: str,
    reference_number: str | None,
    notes: str | None,
) -> None:
    """Record a stock count as an adjustment."""
    handler = CountStockHandler(engine=services().engine)

    try:
        dto = handler.handle(
            item_id=item_id,
            counted_quantity=counted,
            user_id=user_id,
            reference_number=reference_number,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto is None:
        click.echo("Count matches the books; nothing recorded.")
    else:
        click.echo(f"Adjusted by {dto.quantity_change:+d}: {dto.quantity_before} -> {dto.quantity_after}")
