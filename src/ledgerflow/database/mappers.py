"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay
stable when the table layout changes.
"""

from datetime import datetime, UTC
from typing import Optional

from ledgerflow.domain import entities as domain
from ledgerflow.database.models import (
    Account as ORMAccount,
    BankTransaction as ORMBankTransaction,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo; timestamps are always stored as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        type=orm_account.type,
        is_active=orm_account.is_active,
    )


def bank_transaction_to_domain(orm_txn: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_txn.id,
        source_type=orm_txn.source_type,
        source_name=orm_txn.source_name,
        source_account_id=orm_txn.source_account_id,
        transaction_date=orm_txn.transaction_date,
        post_date=orm_txn.post_date,
        amount=orm_txn.amount,
        description=orm_txn.description,
        merchant=orm_txn.merchant,
        original_category=orm_txn.original_category,
        transaction_type=orm_txn.transaction_type,
        card_number=orm_txn.card_number,
        raw_csv_line=orm_txn.raw_csv_line,
        suggested_account_id=orm_txn.suggested_account_id,
        suggested_category=orm_txn.suggested_category,
        suggested_memo=orm_txn.suggested_memo,
        confidence_score=orm_txn.confidence_score,
        status=orm_txn.status,
        approved_account_id=orm_txn.approved_account_id,
        approved_category=orm_txn.approved_category,
        approved_memo=orm_txn.approved_memo,
        is_personal=orm_txn.is_personal,
        journal_entry_id=orm_txn.journal_entry_id,
        created_at=_aware(orm_txn.created_at),
    )


def bank_transaction_from_draft(draft: domain.BankTransactionDraft) -> ORMBankTransaction:
    """Build a new SQLAlchemy BankTransaction row from a draft."""
    return ORMBankTransaction(
        source_type=draft.source_type,
        source_name=draft.source_name,
        source_account_id=draft.source_account_id,
        transaction_date=draft.transaction_date,
        post_date=draft.post_date,
        amount=draft.amount,
        description=draft.description,
        merchant=draft.merchant,
        original_category=draft.original_category,
        transaction_type=draft.transaction_type,
        card_number=draft.card_number,
        raw_csv_line=draft.raw_csv_line,
        suggested_account_id=draft.suggested_account_id,
        suggested_category=draft.suggested_category,
        suggested_memo=draft.suggested_memo,
        confidence_score=draft.confidence_score,
        status=domain.TransactionStatus.PENDING.value,
        is_personal=draft.is_personal,
    )


def journal_entry_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain entity."""
    return domain.JournalEntryLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_id=orm_line.account_id,
        description=orm_line.description,
        debit=orm_line.debit,
        credit=orm_line.credit,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        transaction_date=orm_entry.transaction_date,
        description=orm_entry.description,
        reference=orm_entry.reference,
        status=orm_entry.status,
        created_by=orm_entry.created_by,
        posted_at=_aware(orm_entry.posted_at),
        posted_by=orm_entry.posted_by,
        lines=tuple(journal_entry_line_to_domain(line) for line in orm_entry.lines),
    )
