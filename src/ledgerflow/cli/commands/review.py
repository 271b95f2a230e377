"""Review commands for imported transactions."""

import click

from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.entities import TransactionStatus
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.review import HIGH_CONFIDENCE_THRESHOLD, ReviewService
from ledgerflow.utils.account_resolver import resolve_account


@click.group()
def review_group():
    """Review imported transactions."""
    pass


@review_group.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in TransactionStatus]),
    help="Only show transactions in this status",
)
@click.pass_context
def list_transactions(ctx, status: str | None):
    """List imported transactions."""
    db = ctx.obj["db"]
    service = ReviewService(db)

    transactions = service.list_transactions(status=status)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo("\nTransactions:")
    click.echo("-" * 100)
    for txn in transactions:
        personal = " (personal)" if txn.is_personal else ""
        click.echo(
            f"{txn.id} | {txn.transaction_date.isoformat()} | {txn.amount:>12.2f} | "
            f"{txn.status:8s} | {txn.suggested_category or '-':20s} | "
            f"{txn.confidence_score:3d}% | {txn.description[:30]}{personal}"
        )


@review_group.command("approve")
@click.argument("transaction_ids", nargs=-1, required=True, metavar="ID...")
@click.option("--account", "account_id", help="Account name or ID to use instead of the suggestion")
@click.option("--category", help="Category to record instead of the suggestion")
@click.option("--memo", help="Memo to use instead of the suggestion")
@click.option("--personal/--business", "is_personal", default=None, help="Override personal flag")
@click.pass_context
def approve(
    ctx,
    transaction_ids: tuple[str, ...],
    account_id: str | None,
    category: str | None,
    memo: str | None,
    is_personal: bool | None,
):
    """Approve pending transactions.

    Examples:
        ledgerflow review approve <ID>
        ledgerflow review approve <ID> --account <ACCOUNT_ID> --memo "Printer paper"
        ledgerflow review approve <ID> --personal
    """
    db = ctx.obj["db"]
    service = ReviewService(db)

    if account_id is not None:
        try:
            account_id = resolve_account(AccountService(db).list_accounts(), account_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return

    for transaction_id in transaction_ids:
        try:
            service.approve(
                transaction_id,
                account_id=account_id,
                category=category,
                memo=memo,
                is_personal=is_personal,
            )
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Approved transaction {transaction_id}")


@review_group.command("reject")
@click.argument("transaction_ids", nargs=-1, required=True, metavar="ID...")
@click.pass_context
def reject(ctx, transaction_ids: tuple[str, ...]):
    """Reject pending transactions."""
    db = ctx.obj["db"]
    service = ReviewService(db)

    for transaction_id in transaction_ids:
        try:
            service.reject(transaction_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Rejected transaction {transaction_id}")


@review_group.command("approve-high-confidence")
@click.option(
    "--threshold",
    type=click.IntRange(0, 100),
    default=HIGH_CONFIDENCE_THRESHOLD,
    show_default=True,
    help="Minimum confidence score",
)
@click.pass_context
def approve_high_confidence(ctx, threshold: int):
    """Approve every pending transaction at or above a confidence score."""
    db = ctx.obj["db"]
    service = ReviewService(db)

    try:
        approved = service.approve_high_confidence(threshold=threshold)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Approved {len(approved)} transactions with confidence >= {threshold}%.")


def register_commands(cli):
    """Register review commands with main CLI."""
    cli.add_command(review_group, name="review")
