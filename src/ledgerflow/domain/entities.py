"""Domain model entities for ledgerflow.

These are pure data classes representing business concepts, independent of
database schema and of the HTTP payload shapes.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import StrEnum
from typing import Optional


class SourceType(StrEnum):
    """Kind of account a CSV export came from."""

    BANK = "Bank"
    CREDIT_CARD = "CreditCard"


class TransactionStatus(StrEnum):
    """Review/posting state of an imported bank transaction."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    POSTED = "Posted"


class AccountType(StrEnum):
    """Chart-of-accounts type."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"


TERMINAL_STATUSES = frozenset({TransactionStatus.REJECTED, TransactionStatus.POSTED})

OWNERS_DRAW = "Owner's Draw"
OWNERS_CONTRIBUTION = "Owner's Contribution"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: str
    code: Optional[str]
    name: str
    type: str
    is_active: bool = True


@dataclass(frozen=True)
class NormalizedTransaction:
    """One CSV row mapped onto the common transaction shape."""

    transaction_date: date
    amount: Decimal
    description: str
    raw_line: str
    post_date: Optional[date] = None
    original_category: Optional[str] = None
    transaction_type: Optional[str] = None
    card_number: Optional[str] = None
    is_personal: bool = False
    category: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class TrainingExample:
    """Historical labeled transaction used as a categorization hint."""

    description: str
    category: str


@dataclass(frozen=True)
class SourceContext:
    """Where an imported batch came from, as shown to the suggestion service."""

    source_type: str
    source_name: Optional[str]

    @property
    def label(self) -> str:
        if self.source_name:
            return f"{self.source_type} ({self.source_name})"
        return self.source_type


@dataclass(frozen=True)
class CategorizationResult:
    """Suggested account, category and memo for one transaction."""

    account_name: Optional[str]
    category: str
    memo: str
    confidence: int

    @classmethod
    def fallback(cls, description: str) -> "CategorizationResult":
        """Deterministic zero-confidence result used when suggestion fails."""
        return cls(
            account_name=None,
            category="Uncategorized",
            memo=description[:100],
            confidence=0,
        )


@dataclass(frozen=True)
class BankTransactionDraft:
    """A bank transaction ready to be inserted (no identifier yet)."""

    source_type: str
    source_name: Optional[str]
    source_account_id: Optional[str]
    transaction_date: date
    amount: Decimal
    description: str
    merchant: str
    raw_csv_line: str
    post_date: Optional[date] = None
    original_category: Optional[str] = None
    transaction_type: Optional[str] = None
    card_number: Optional[str] = None
    suggested_account_id: Optional[str] = None
    suggested_category: Optional[str] = None
    suggested_memo: Optional[str] = None
    confidence_score: int = 0
    is_personal: bool = False


@dataclass(frozen=True)
class BankTransaction:
    """Imported bank/credit-card line item."""

    id: str
    source_type: str
    source_name: Optional[str]
    source_account_id: Optional[str]
    transaction_date: date
    post_date: Optional[date]
    amount: Decimal
    description: str
    merchant: str
    original_category: Optional[str]
    transaction_type: Optional[str]
    card_number: Optional[str]
    raw_csv_line: str
    suggested_account_id: Optional[str]
    suggested_category: Optional[str]
    suggested_memo: Optional[str]
    confidence_score: int
    status: str
    approved_account_id: Optional[str]
    approved_category: Optional[str]
    approved_memo: Optional[str]
    is_personal: bool
    journal_entry_id: Optional[str]
    created_at: datetime

    @property
    def posting_account_id(self) -> Optional[str]:
        """Approved account, else suggested account."""
        return self.approved_account_id or self.suggested_account_id

    @property
    def posting_memo(self) -> str:
        return self.approved_memo or self.suggested_memo or self.description


@dataclass(frozen=True)
class JournalEntryLine:
    """One side of a journal entry."""

    id: str
    journal_entry_id: str
    account_id: str
    description: Optional[str]
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class JournalLineDraft:
    """A journal entry line ready to be inserted."""

    account_id: str
    description: Optional[str]
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with its lines."""

    id: str
    transaction_date: date
    description: Optional[str]
    reference: Optional[str]
    status: str
    created_by: str
    posted_at: Optional[datetime]
    posted_by: Optional[str]
    lines: tuple[JournalEntryLine, ...] = ()


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import request."""

    count: int
    format: str
    transactions: list[BankTransaction] = field(default_factory=list)
    total_rows: int = 0
    next_offset: Optional[int] = None
