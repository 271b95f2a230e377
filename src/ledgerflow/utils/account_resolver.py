"""Utility for resolving account names to IDs."""

from typing import Sequence

from ledgerflow.domain.entities import Account
from ledgerflow.domain.errors import NotFoundError


def resolve_account(accounts: Sequence[Account], account: str) -> str:
    """Resolve account name or ID to account ID.

    Args:
        accounts: Chart of accounts to search
        account: Account ID or exact account name

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account has that ID or name
    """
    for acc in accounts:
        if acc.id == account:
            return acc.id

    for acc in accounts:
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
