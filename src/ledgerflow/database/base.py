"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerflow.domain.entities import (
    Account,
    BankTransaction,
    BankTransactionDraft,
    JournalEntry,
    JournalLineDraft,
)


class UnitOfWork(ABC):
    """Operations executed inside one database transaction.

    Everything done through a unit of work becomes durable together when
    the surrounding :meth:`Database.unit_of_work` block exits normally, and
    is discarded when it exits with an exception.
    """

    # Account operations
    @abstractmethod
    def create_account(
        self, name: str, account_type: str, code: Optional[str] = None, is_active: bool = True
    ) -> Account:
        """Create a chart-of-accounts entry."""

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by code, then name."""

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""

    @abstractmethod
    def find_account(self, name: str, account_type: Optional[str] = None) -> Optional[Account]:
        """Find an account by exact name, optionally restricted to a type."""

    # Bank transaction operations
    @abstractmethod
    def add_bank_transaction(self, draft: BankTransactionDraft) -> BankTransaction:
        """Insert a Pending bank transaction and return it with its ID."""

    @abstractmethod
    def get_bank_transaction(self, transaction_id: str) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""

    @abstractmethod
    def lock_bank_transaction(self, transaction_id: str) -> Optional[BankTransaction]:
        """Get bank transaction by ID, holding a row lock until commit."""

    @abstractmethod
    def lock_postable_transaction(self, transaction_id: str) -> Optional[BankTransaction]:
        """Lock and return the transaction only if it is Approved and unposted."""

    @abstractmethod
    def list_bank_transactions(
        self, status: Optional[str] = None, min_confidence: Optional[int] = None
    ) -> list[BankTransaction]:
        """List bank transactions, newest first, with optional filters."""

    @abstractmethod
    def update_review(
        self,
        transaction_id: str,
        status: str,
        approved_account_id: Optional[str] = None,
        approved_category: Optional[str] = None,
        approved_memo: Optional[str] = None,
        is_personal: Optional[bool] = None,
    ) -> BankTransaction:
        """Record a review decision on a bank transaction."""

    @abstractmethod
    def claim_for_posting(self, transaction_id: str) -> bool:
        """Atomically move an Approved, unposted transaction to Posted.

        Returns False when another batch already claimed it.
        """

    @abstractmethod
    def mark_posted(self, transaction_id: str, journal_entry_id: str) -> BankTransaction:
        """Set status Posted and link the journal entry."""

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        transaction_date: date,
        description: Optional[str],
        reference: str,
        created_by: str,
        lines: Sequence[JournalLineDraft],
    ) -> JournalEntry:
        """Create a Posted journal entry header with its lines."""

    @abstractmethod
    def get_journal_entry(self, journal_entry_id: str) -> Optional[JournalEntry]:
        """Get journal entry (with lines) by ID."""

    @abstractmethod
    def list_journal_entries(self) -> list[JournalEntry]:
        """List all journal entries."""

    # Maintenance
    @abstractmethod
    def reset_ledger(self) -> dict[str, int]:
        """Delete ledger data in FK-safe order, keeping accounts.

        Returns the number of deleted rows per table.
        """


class Database(ABC):
    """Abstract database interface for ledgerflow."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release pooled connections."""

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[UnitOfWork]:
        """Borrow a connection and open a transaction.

        Commits when the block exits normally, rolls back on any exception,
        and always returns the connection to the pool.
        """

    # Single-operation conveniences, each in its own transaction
    def create_account(
        self, name: str, account_type: str, code: Optional[str] = None, is_active: bool = True
    ) -> Account:
        """Create a chart-of-accounts entry."""
        with self.unit_of_work() as uow:
            return uow.create_account(name, account_type, code=code, is_active=is_active)

    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        with self.unit_of_work() as uow:
            return uow.list_accounts()

    def get_bank_transaction(self, transaction_id: str) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        with self.unit_of_work() as uow:
            return uow.get_bank_transaction(transaction_id)

    def list_bank_transactions(
        self, status: Optional[str] = None, min_confidence: Optional[int] = None
    ) -> list[BankTransaction]:
        """List bank transactions with optional filters."""
        with self.unit_of_work() as uow:
            return uow.list_bank_transactions(status=status, min_confidence=min_confidence)

    def get_journal_entry(self, journal_entry_id: str) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        with self.unit_of_work() as uow:
            return uow.get_journal_entry(journal_entry_id)

    def list_journal_entries(self) -> list[JournalEntry]:
        """List all journal entries."""
        with self.unit_of_work() as uow:
            return uow.list_journal_entries()
