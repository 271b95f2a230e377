"""Ledger reset command."""

import click

from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.maintenance import MaintenanceService


@click.command("reset-db")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_db(ctx, yes: bool):
    """Delete all bank transactions, journal entries and invoices.

    The chart of accounts is kept.
    """
    if not yes:
        click.confirm(
            "This deletes all imported transactions, journal entries and invoices. Continue?",
            abort=True,
        )

    db = ctx.obj["db"]
    service = MaintenanceService(db)

    try:
        deleted = service.reset_ledger()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("Database reset successfully")
    for table, count in deleted.items():
        click.echo(f"  {table}: {count} deleted")


def register_commands(cli):
    """Register reset-db command with main CLI."""
    cli.add_command(reset_db)
