"""Chart-of-accounts commands."""

import click

from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.entities import OWNERS_CONTRIBUTION, OWNERS_DRAW, AccountType
from ledgerflow.domain.errors import DomainError


# Default chart of accounts: (code, name, type)
DEFAULT_CHART_OF_ACCOUNTS = [
    # Assets
    ("1000", "Business Checking", AccountType.ASSET),
    ("1010", "Business Savings", AccountType.ASSET),
    # Liabilities
    ("2000", "Business Credit Card", AccountType.LIABILITY),
    # Equity (required for personal transactions)
    ("3000", "Owner's Equity", AccountType.EQUITY),
    ("3100", OWNERS_DRAW, AccountType.EQUITY),
    ("3200", OWNERS_CONTRIBUTION, AccountType.EQUITY),
    # Revenue
    ("4000", "Sales", AccountType.REVENUE),
    ("4100", "Service Revenue", AccountType.REVENUE),
    ("4900", "Interest Income", AccountType.REVENUE),
    # Expenses
    ("6000", "Advertising & Marketing", AccountType.EXPENSE),
    ("6100", "Bank Fees", AccountType.EXPENSE),
    ("6200", "Meals & Entertainment", AccountType.EXPENSE),
    ("6300", "Office Supplies", AccountType.EXPENSE),
    ("6400", "Professional Services", AccountType.EXPENSE),
    ("6500", "Rent", AccountType.EXPENSE),
    ("6600", "Software & Subscriptions", AccountType.EXPENSE),
    ("6700", "Travel", AccountType.EXPENSE),
    ("6800", "Utilities", AccountType.EXPENSE),
    ("6900", "Vehicle Expenses", AccountType.EXPENSE),
]


@click.group()
def accounts_group():
    """Manage the chart of accounts."""
    pass


@accounts_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(f"{acc.code or '':6s} | {acc.name:30s} | {acc.type:10s} | ID: {acc.id}")


@accounts_group.command("add")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice([t.value for t in AccountType]),
    help="Account type",
)
@click.option("--code", help="Account code")
@click.pass_context
def add_account(ctx, name: str, account_type: str, code: str | None):
    """Add an account to the chart.

    Examples:
        ledgerflow accounts add "Chase Checking" --type Asset --code 1020
        ledgerflow accounts add "Owner's Draw" --type Equity
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account = service.create_account(name=name, account_type=account_type, code=code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created account '{account.name}' (ID: {account.id})")


@accounts_group.command("init")
@click.option("--force", is_flag=True, help="Add missing default accounts even if some exist")
@click.pass_context
def init_accounts(ctx, force: bool):
    """Initialize the database with a default chart of accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    existing = {acc.name for acc in service.list_accounts()}
    if existing and not force:
        click.echo("Accounts already exist. Use --force to add missing defaults.")
        return

    click.echo("Creating default chart of accounts...")

    created = 0
    errors = 0
    for code, name, account_type in DEFAULT_CHART_OF_ACCOUNTS:
        if name in existing:
            continue
        try:
            service.create_account(name=name, account_type=account_type.value, code=code)
            created += 1
        except DomainError as e:
            click.echo(f"Warning: Could not create account '{name}': {e}", err=True)
            errors += 1

    if errors == 0:
        click.echo(f"Successfully created {created} accounts.")
    else:
        click.echo(f"Created {created} accounts with {errors} errors.")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(accounts_group, name="accounts")
