"""Shared pytest fixtures for ledgerflow tests."""

import json
import os
import tempfile
import threading
from datetime import date
from decimal import Decimal

import pytest

from ledgerflow.clients import AccountCatalog, DatabaseAccountCatalog, SuggestionClient
from ledgerflow.config import Settings
from ledgerflow.database.factories import create_sqlite_database
from ledgerflow.domain.categorization import CategorizationEngine
from ledgerflow.domain.csv_import import CSVImportService
from ledgerflow.domain.entities import (
    BankTransactionDraft,
    OWNERS_CONTRIBUTION,
    OWNERS_DRAW,
    TrainingExample,
)
from ledgerflow.domain.posting import PostingService
from ledgerflow.domain.review import ReviewService
from ledgerflow.domain.training import TrainingCorpus
from ledgerflow.services import build_services


def suggestion_reply(account_name, category=None, memo="Imported", confidence=85, prose=True):
    """Build a chat reply the way the AI service tends to answer."""
    body = json.dumps(
        {
            "accountName": account_name,
            "category": category or account_name,
            "memo": memo,
            "confidence": confidence,
        }
    )
    if prose:
        return f"Here is my suggestion:\n```json\n{body}\n```"
    return body


class FakeSuggestionClient(SuggestionClient):
    """Suggestion client answering from a keyword table."""

    def __init__(self, replies=None, default=None, error=None):
        self.replies = replies or {}
        self.default = default if default is not None else suggestion_reply("Office Supplies")
        self.error = error
        self.prompts = []
        self._lock = threading.Lock()

    def complete(self, system_prompt, user_prompt):
        with self._lock:
            self.prompts.append(user_prompt)
        if self.error is not None:
            raise self.error
        for keyword, reply in self.replies.items():
            if keyword in user_prompt:
                return reply
        return self.default


class FakeAccountCatalog(AccountCatalog):
    """Fixed chart of accounts."""

    def __init__(self, accounts):
        self.accounts = list(accounts)

    def list_accounts(self):
        return list(self.accounts)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep developer environment variables out of the tests."""
    for key in (
        "LEDGERFLOW_DATABASE_URL",
        "LEDGERFLOW_DB_PATH",
        "ACCOUNTS_API_URL",
        "AI_ENDPOINT",
        "AI_API_KEY",
        "TRAINING_DATA_PATH",
        "IMPORT_BATCH_SIZE",
        "CATEGORIZATION_WORKERS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart(temp_db):
    """Seed a small chart of accounts and return it keyed by name."""
    accounts = [
        ("1000", "Business Checking", "Asset"),
        ("2000", "Business Credit Card", "Liability"),
        ("3100", OWNERS_DRAW, "Equity"),
        ("3200", OWNERS_CONTRIBUTION, "Equity"),
        ("4000", "Sales", "Revenue"),
        ("6300", "Office Supplies", "Expense"),
        ("6600", "Software & Subscriptions", "Expense"),
    ]
    return {
        name: temp_db.create_account(name=name, account_type=account_type, code=code)
        for code, name, account_type in accounts
    }


@pytest.fixture
def suggestion_client():
    """Create a fake suggestion client that answers 'Office Supplies'."""
    return FakeSuggestionClient()


@pytest.fixture
def corpus():
    """Create a small training corpus."""
    return TrainingCorpus(
        [
            TrainingExample("STAPLES STORE 123", "Office Supplies"),
            TrainingExample("ADOBE CREATIVE CLOUD", "Software & Subscriptions"),
            TrainingExample("CLIENT PAYMENT ACME", "Sales"),
        ]
    )


@pytest.fixture
def import_service(temp_db, chart, suggestion_client, corpus):
    """Create a CSVImportService backed by the temporary database."""
    engine = CategorizationEngine(suggestion_client, corpus)
    return CSVImportService(
        temp_db, DatabaseAccountCatalog(temp_db), engine, batch_size=10, max_workers=2
    )


@pytest.fixture
def posting_service(temp_db):
    """Create a PostingService with a temporary database."""
    return PostingService(temp_db)


@pytest.fixture
def review_service(temp_db):
    """Create a ReviewService with a temporary database."""
    return ReviewService(temp_db)


@pytest.fixture
def make_transaction(temp_db, chart):
    """Insert a Pending bank transaction with sensible defaults."""

    def _make(**overrides):
        fields = dict(
            source_type="Bank",
            source_name="Business Checking",
            source_account_id=chart["Business Checking"].id,
            transaction_date=date(2024, 1, 15),
            amount=Decimal("-42.50"),
            description="STAPLES STORE 123",
            merchant="STAPLES STORE 123",
            raw_csv_line="01/15/2024,-42.50,*,,STAPLES STORE 123",
            suggested_account_id=chart["Office Supplies"].id,
            suggested_category="Office Supplies",
            suggested_memo="Printer paper",
            confidence_score=85,
        )
        fields.update(overrides)
        with temp_db.unit_of_work() as uow:
            return uow.add_bank_transaction(BankTransactionDraft(**fields))

    return _make


@pytest.fixture
def services(temp_db, chart, suggestion_client, corpus):
    """Build the full service container around fakes."""
    return build_services(
        Settings(),
        db=temp_db,
        account_catalog=DatabaseAccountCatalog(temp_db),
        suggestion_client=suggestion_client,
        corpus=corpus,
    )


@pytest.fixture
def api_client(services):
    """Create a FastAPI test client with startup/shutdown run."""
    from fastapi.testclient import TestClient

    from ledgerflow.api import create_app

    with TestClient(create_app(services=services)) as client:
        yield client


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def wells_fargo_csv():
    """Two-row Wells Fargo export (no header, five columns)."""
    return (
        b'"01/15/2024","-42.50","*","","STAPLES STORE 123"\n'
        b'"01/16/2024","1500.00","*","","CLIENT PAYMENT ACME CORP"\n'
    )
