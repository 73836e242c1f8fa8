"""CLI commands for recording and browsing transactions."""

from __future__ import annotations

from datetime import datetime

import click

from stockledger.application.list_transactions import ListTransactionsHandler
from stockledger.application.record_transaction import RecordTransactionHandler
from stockledger.domain.exceptions import DomainException
from stockledger.domain.model.transaction import TransactionType
from stockledger.domain.service.clock import ensure_utc
from stockledger.infrastructure.bootstrap import services

_TYPE_CHOICES = [t.value for t in TransactionType] + ["in", "out"]


@click.command("record")
@click.option("--type", "txn_type", required=True, type=click.Choice(_TYPE_CHOICES, case_sensitive=False))
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--quantity", type=int, default=None, help="Units moved (all types but adjustment).")
@click.option("--delta", type=int, default=None, help="Signed change (adjustment only).")
@click.option("--price", required=True, help="Unit price at the time of the movement.")
@click.option("--user", "user_id", required=True, help="Acting user ID.")
@click.option("--supplier", default=None, help="Supplier ID.")
@click.option("--ref", "reference_number", default=None, help="Reference number.")
@click.option("--notes", default=None)
def txn_record(
    txn_type: str,
    item_id: str,
    quantity: int | None,
    delta: int | None,
    price: str,
    user_id: str,
    supplier: str | None,
    reference_number: str | None,
    notes: str | None,
) -> None:
    """Record a stock movement."""
    handler = RecordTransactionHandler(engine=services().engine)

    try:
        dto = handler.handle(
            transaction_type=txn_type,
            item_id=item_id,
            unit_price=price,
            user_id=user_id,
            quantity=quantity,
            delta=delta,
            supplier_id=supplier,
            reference_number=reference_number,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transaction {dto.id} recorded ({dto.transaction_type})")
    click.echo(f"Quantity: {dto.quantity_before} -> {dto.quantity_after}")
    click.echo(f"Total:    {dto.total_price}")


@click.command("list")
@click.option("--item", "item_id", default=None, help="Only this item.")
@click.option("--type", "txn_type", default=None, type=click.Choice(_TYPE_CHOICES, case_sensitive=False))
@click.option("--from", "date_from", type=click.DateTime(), default=None, help="Inclusive start (UTC).")
@click.option("--to", "date_to", type=click.DateTime(), default=None, help="Exclusive end (UTC).")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--page-size", default=None, type=int)
def txn_list(
    item_id: str | None,
    txn_type: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
    page: int,
    page_size: int | None,
) -> None:
    """List transactions, newest first."""
    svc = services()
    handler = ListTransactionsHandler(
        transaction_log=svc.transaction_log,
        default_page_size=svc.settings.DEFAULT_PAGE_SIZE,
        max_page_size=svc.settings.MAX_PAGE_SIZE,
    )

    try:
        result = handler.handle(
            item_id=item_id,
            transaction_type=txn_type,
            date_from=ensure_utc(date_from),
            date_to=ensure_utc(date_to),
            page=page,
            page_size=page_size,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"{'Created':<20} {'Type':<11} {'Item':<34} {'Change':>7} {'Total':>10}")
    click.echo("-" * 86)
    for dto in result.transactions:
        click.echo(
            f"{dto.created_at[:19]:<20} {dto.transaction_type:<11} {dto.item_id:<34} "
            f"{dto.quantity_change:>+7d} {dto.total_price:>10}"
        )
    click.echo(f"Page {result.page} of {result.pages} ({result.total} transactions)")
