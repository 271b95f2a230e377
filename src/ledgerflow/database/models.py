"""SQLAlchemy models for the ledgerflow database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Integer,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

MONEY = Numeric(19, 4)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Chart-of-accounts model."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    code = Column(String, nullable=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class BankTransaction(Base):
    """Imported bank/credit-card transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    source_type = Column(String, nullable=False)
    source_name = Column(String, nullable=True)
    source_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    transaction_date = Column(Date, nullable=False)
    post_date = Column(Date, nullable=True)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=False)
    merchant = Column(String(200), nullable=False)
    original_category = Column(String, nullable=True)
    transaction_type = Column(String, nullable=True)
    card_number = Column(String, nullable=True)
    raw_csv_line = Column(String, nullable=False)
    suggested_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    suggested_category = Column(String, nullable=True)
    suggested_memo = Column(String, nullable=True)
    confidence_score = Column(Integer, default=0, nullable=False)
    status = Column(String, default="Pending", nullable=False, index=True)
    approved_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    approved_category = Column(String, nullable=True)
    approved_memo = Column(String, nullable=True)
    is_personal = Column(Boolean, default=False, nullable=False)
    journal_entry_id = Column(String(36), ForeignKey("journal_entries.id"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(String(36), primary_key=True, default=_new_id)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    status = Column(String, nullable=False)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    posted_at = Column(DateTime, nullable=True)
    posted_by = Column(String, nullable=True)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.line_number",
    )


class JournalEntryLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_entry_lines"

    id = Column(String(36), primary_key=True, default=_new_id)
    journal_entry_id = Column(String(36), ForeignKey("journal_entries.id"), nullable=False)
    line_number = Column(Integer, nullable=False, default=0)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)
    description = Column(String, nullable=True)
    debit = Column(MONEY, default=0, nullable=False)
    credit = Column(MONEY, default=0, nullable=False)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")


class Invoice(Base):
    """Invoice header, owned by the CRUD layer; cleared by ledger reset."""

    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=_new_id)
    invoice_number = Column(String, nullable=True)
    customer_name = Column(String, nullable=True)
    issue_date = Column(Date, nullable=True)
    total_amount = Column(MONEY, default=0, nullable=False)
    status = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    lines = relationship("InvoiceLine", back_populates="invoice")


class InvoiceLine(Base):
    """Invoice line, owned by the CRUD layer; cleared by ledger reset."""

    __tablename__ = "invoice_lines"

    id = Column(String(36), primary_key=True, default=_new_id)
    invoice_id = Column(String(36), ForeignKey("invoices.id"), nullable=False)
    description = Column(String, nullable=True)
    quantity = Column(Numeric(19, 4), default=1, nullable=False)
    unit_price = Column(MONEY, default=0, nullable=False)
    amount = Column(MONEY, default=0, nullable=False)

    invoice = relationship("Invoice", back_populates="lines")


def create_database_engine(database_url: str) -> Engine:
    """Create a pooled SQLAlchemy engine and make sure the schema exists."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are borrowed by request threads
        connect_args = {"check_same_thread": False}
    engine = create_engine(
        database_url, echo=False, connect_args=connect_args, pool_pre_ping=True
    )
    Base.metadata.create_all(engine)
    return engine
