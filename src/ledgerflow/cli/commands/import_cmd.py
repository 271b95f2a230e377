"""CSV import command."""

from pathlib import Path

import click

from ledgerflow.cli.context import get_services
from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.entities import SourceType
from ledgerflow.domain.errors import DomainError
from ledgerflow.utils.account_resolver import resolve_account


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--source-type",
    type=click.Choice([t.value for t in SourceType]),
    default=SourceType.BANK.value,
    show_default=True,
    help="Kind of account the export came from",
)
@click.option("--source-account", help="Name or ID of the bank or card account")
@click.option("--source-name", help="Display name of the source account")
@click.option("--offset", type=click.IntRange(min=0), default=0, help="First data row to process")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    source_type: str,
    source_account: str | None,
    source_name: str | None,
    offset: int,
):
    """Import transactions from a bank or credit-card CSV file.

    Rows are categorized and stored as Pending for review. Large files are
    processed one window at a time; rerun with the printed --offset to
    continue.

    Examples:
        ledgerflow import chase.csv --source-type CreditCard --source-account "Chase Sapphire"
        ledgerflow import checking.csv --source-name "Wells Checking" --offset 10
    """
    services = get_services(ctx)

    try:
        source_account_id = None
        if source_account is not None:
            source_account_id = resolve_account(
                services.account_catalog.list_accounts(), source_account
            )
        result = services.import_service.import_csv(
            Path(csv_file).read_bytes(),
            source_type=source_type,
            source_account_id=source_account_id,
            source_name=source_name,
            offset=offset,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Format: {result.format}")
    click.echo(f"  Imported: {result.count} transactions")
    click.echo(f"  Training examples: {len(services.corpus)}")
    for txn in result.transactions:
        click.echo(
            f"  {txn.transaction_date.isoformat()} | {txn.amount:>12.2f} | "
            f"{txn.suggested_category or '-':25s} | {txn.confidence_score:3d}% | {txn.description[:40]}"
        )
    if result.next_offset is not None:
        click.echo(
            f"\n{result.total_rows - result.next_offset} rows remaining. "
            f"Continue with --offset {result.next_offset}"
        )


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
