import click

from stockledger.infrastructure.cli.item_commands import (
    item_add,
    item_count,
    item_delete,
    item_list,
    item_show,
    item_update,
)
from stockledger.infrastructure.cli.report_commands import (
    report_reorder,
    report_transactions,
    report_value,
)
from stockledger.infrastructure.cli.transaction_commands import txn_list, txn_record


@click.group()
def cli() -> None:
    """Stock Ledger — inventory quantities and stock movements"""


@cli.group()
def item() -> None:
    """Manage items."""


@cli.group()
def txn() -> None:
    """Record and browse stock movements."""


@cli.group()
def report() -> None:
    """Read-only reports."""


@cli.command("serve")
@click.option("--host", default=None, help="Bind address (defaults to STOCKLEDGER_HTTP_HOST).")
@click.option("--port", default=None, type=int, help="Port (defaults to STOCKLEDGER_HTTP_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    import uvicorn

    from stockledger.infrastructure.bootstrap import services
    from stockledger.infrastructure.http.app import create_app

    svc = services()
    uvicorn.run(
        create_app(svc),
        host=host or svc.settings.HTTP_HOST,
        port=port or svc.settings.HTTP_PORT,
    )


# Register subcommands
item.add_command(item_add)
item.add_command(item_count)
item.add_command(item_delete)
item.add_command(item_list)
item.add_command(item_show)
item.add_command(item_update)
txn.add_command(txn_list)
txn.add_command(txn_record)
report.add_command(report_reorder)
report.add_command(report_transactions)
report.add_command(report_value)
