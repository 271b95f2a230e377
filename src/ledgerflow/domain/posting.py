"""Posting domain service.

Turns Approved bank transactions into balanced two-line journal entries.
A posting batch is all-or-nothing: every requested transaction is handled
inside one unit of work, and any rule violation rolls the whole batch back.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ledgerflow.database.base import Database, UnitOfWork
from ledgerflow.domain.entities import (
    AccountType,
    BankTransaction,
    JournalLineDraft,
    OWNERS_CONTRIBUTION,
    OWNERS_DRAW,
)
from ledgerflow.domain.errors import (
    PostingRuleViolation,
    ValidationError,
    missing_posting_accounts,
)

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "System Import"


@dataclass(frozen=True)
class PostingAccounts:
    """Debit and credit side of one posting."""

    debit_account_id: Optional[str]
    credit_account_id: Optional[str]


def resolve_posting_accounts(
    txn: BankTransaction, equity_account_id: Callable[[str], str]
) -> PostingAccounts:
    """Pick debit and credit accounts for a transaction.

    Personal spending goes to Owner's Draw, personal deposits to Owner's
    Contribution. Business rows use the approved account, falling back to
    the suggested one. The source account takes the other side.

    Args:
        txn: Approved bank transaction
        equity_account_id: Returns the ID of the named Equity account

    Returns:
        PostingAccounts, either side possibly None if unresolved
    """
    is_expense = txn.amount < 0
    if txn.is_personal:
        if is_expense:
            return PostingAccounts(equity_account_id(OWNERS_DRAW), txn.source_account_id)
        return PostingAccounts(txn.source_account_id, equity_account_id(OWNERS_CONTRIBUTION))

    if is_expense:
        return PostingAccounts(txn.posting_account_id, txn.source_account_id)
    return PostingAccounts(txn.source_account_id, txn.posting_account_id)


def journal_lines(txn: BankTransaction, accounts: PostingAccounts) -> list[JournalLineDraft]:
    """Build the debit and credit lines for the absolute transaction amount."""
    amount = abs(txn.amount)
    memo = txn.posting_memo
    return [
        JournalLineDraft(account_id=accounts.debit_account_id, description=memo, debit=amount),
        JournalLineDraft(account_id=accounts.credit_account_id, description=memo, credit=amount),
    ]


class PostingService:
    """Service for posting approved transactions to the ledger."""

    def __init__(self, db: Database):
        """Initialize posting service.

        Args:
            db: Database instance
        """
        self.db = db

    def post_transactions(self, transaction_ids: Iterable[str]) -> int:
        """Post every requested transaction that is Approved and unposted.

        IDs that are unknown, not Approved or already posted are skipped.

        Args:
            transaction_ids: Bank transaction IDs

        Returns:
            Number of transactions actually posted

        Raises:
            ValidationError: If no IDs were given
            PostingRuleViolation: If a transaction cannot be balanced; nothing
                from the batch is kept
            PersistenceError: If the database rejected the batch
        """
        ids = list(dict.fromkeys(tid for tid in transaction_ids if tid))
        if not ids:
            raise ValidationError("No transaction IDs provided")

        posted = 0
        with self.db.unit_of_work() as uow:
            equity = _EquityAccounts(uow)
            for transaction_id in ids:
                txn = uow.lock_postable_transaction(transaction_id)
                if txn is None:
                    logger.debug("Skipping transaction %s: not Approved or already posted", transaction_id)
                    continue

                accounts = resolve_posting_accounts(txn, equity.get)
                if not accounts.debit_account_id or not accounts.credit_account_id:
                    raise PostingRuleViolation(missing_posting_accounts(txn.id))

                if not uow.claim_for_posting(txn.id):
                    logger.warning("Transaction %s was posted by a concurrent batch", txn.id)
                    continue

                entry = uow.create_journal_entry(
                    transaction_date=txn.transaction_date,
                    description=txn.description,
                    reference=f"Bank Txn {txn.id}",
                    created_by=SYSTEM_ACTOR,
                    lines=journal_lines(txn, accounts),
                )
                uow.mark_posted(txn.id, entry.id)
                posted += 1

        logger.info("Posted %d of %d requested transactions", posted, len(ids))
        return posted


class _EquityAccounts:
    """Looks up Owner's Draw and Owner's Contribution once per batch."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._ids: Optional[dict[str, str]] = None

    def get(self, name: str) -> str:
        if self._ids is None:
            draw = self.uow.find_account(OWNERS_DRAW, AccountType.EQUITY.value)
            contribution = self.uow.find_account(OWNERS_CONTRIBUTION, AccountType.EQUITY.value)
            if draw is None or contribution is None:
                raise PostingRuleViolation("Owner's Equity accounts not found")
            self._ids = {OWNERS_DRAW: draw.id, OWNERS_CONTRIBUTION: contribution.id}
        return self._ids[name]
