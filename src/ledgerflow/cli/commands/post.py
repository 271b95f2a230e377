"""Posting command."""

import click

from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.posting import PostingService


@click.command("post")
@click.argument("transaction_ids", nargs=-1, required=True, metavar="ID...")
@click.pass_context
def post_transactions(ctx, transaction_ids: tuple[str, ...]):
    """Post approved transactions to the ledger.

    Every ID is posted in one batch: if any transaction cannot be balanced,
    nothing is posted. IDs that are not Approved are skipped.

    Examples:
        ledgerflow post 6f1c... 9a2e...
    """
    db = ctx.obj["db"]
    service = PostingService(db)

    try:
        count = service.post_transactions(list(transaction_ids))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Posted {count} of {len(set(transaction_ids))} transactions.")


def register_commands(cli):
    """Register post command with main CLI."""
    cli.add_command(post_transactions)
