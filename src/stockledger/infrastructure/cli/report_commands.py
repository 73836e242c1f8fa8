"""CLI commands for read-side reports."""

from __future__ import annotations

from datetime import datetime

import click

from stockledger.application.reports import (
    InventoryValueReportHandler,
    ShowReorderAlertsHandler,
    TransactionReportHandler,
)
from stockledger.domain.exceptions import DomainException
from stockledger.domain.service.clock import ensure_utc
from stockledger.domain.service.reporting import PERIODS
from stockledger.infrastructure.bootstrap import services


@click.command("reorder")
def report_reorder() -> None:
    """Items below their reorder level, lowest stock first."""
    alerts = ShowReorderAlertsHandler(monitor=services().reorder_monitor).handle()

    if not alerts:
        click.echo("All items are above their reorder level.")
        return

    click.echo(f"{'SKU':<14} {'Name':<24} {'Qty':>6} {'Level':>6} {'Short':>6} {'Order':>6}")
    click.echo("-" * 67)
    for a in alerts:
        click.echo(
            f"{a.sku:<14} {a.name:<24} {a.quantity:>6} {a.reorder_level:>6} "
            f"{a.shortfall:>6} {a.reorder_quantity:>6}"
        )


@click.command("value")
def report_value() -> None:
    """Inventory value grouped by category."""
    report = InventoryValueReportHandler(reporting=services().reporting).handle()

    click.echo(f"{'Category':<34} {'Items':>6} {'Units':>8} {'Value':>12}")
    click.echo("-" * 63)
    for c in report.categories:
        click.echo(f"{c.category_id:<34} {c.item_count:>6} {c.total_quantity:>8} {c.total_value:>12}")
    click.echo("-" * 63)
    click.echo(f"{'Total':<50} {report.total_value:>12}")


@click.command("transactions")
@click.option("--period", type=click.Choice(list(PERIODS)), default=None)
@click.option("--from", "date_from", type=click.DateTime(), default=None, help="Inclusive start (UTC).")
@click.option("--to", "date_to", type=click.DateTime(), default=None, help="Exclusive end (UTC).")
def report_transactions(
    period: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
) -> None:
    """Outbound value and counts per transaction type."""
    if period is None and date_from is None and date_to is None:
        period = "week"
    handler = TransactionReportHandler(reporting=services().reporting)

    try:
        totals = handler.handle(
            period=period,
            date_from=ensure_utc(date_from),
            date_to=ensure_utc(date_to),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Window:        {totals.date_from or '-'} .. {totals.date_to or '-'}")
    click.echo(f"Outbound value: {totals.outbound_value}")
    click.echo(f"Transactions:   {totals.transaction_count}")
    for name, count in sorted(totals.counts_by_type.items()):
        click.echo(f"  {name:<12} {count:>6}")
