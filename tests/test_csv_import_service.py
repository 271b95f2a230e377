"""Domain tests for CSV import service."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from conftest import FakeAccountCatalog, FakeSuggestionClient, suggestion_reply
from ledgerflow.database.sqlalchemy_db import SQLAlchemyUnitOfWork
from ledgerflow.domain.categorization import CategorizationEngine
from ledgerflow.domain.csv_import import CSVImportService, read_csv_records
from ledgerflow.domain.errors import (
    ExternalServiceError,
    FormatError,
    PersistenceError,
    ValidationError,
)


def wells_fargo_rows(count):
    return "".join(
        f'"01/{day:02d}/2024","-{day}.00","*","","VENDOR {day}"\n' for day in range(1, count + 1)
    ).encode()


def test_import_two_row_wells_fargo(import_service, temp_db, chart, wells_fargo_csv):
    """A two-row headerless export produces two Pending transactions."""
    checking = chart["Business Checking"]

    result = import_service.import_csv(
        wells_fargo_csv, source_type="Bank", source_account_id=checking.id
    )

    assert result.count == 2
    assert result.format == "wells-fargo"
    assert result.total_rows == 2
    assert result.next_offset is None

    stored = temp_db.list_bank_transactions()
    assert len(stored) == 2
    by_amount = {txn.amount: txn for txn in stored}
    assert set(by_amount) == {Decimal("-42.50"), Decimal("1500.00")}
    for txn in stored:
        assert txn.status == "Pending"
        assert txn.suggested_category is not None
        assert txn.source_account_id == checking.id
        assert txn.source_name == "Business Checking"
        assert txn.is_personal is False
        assert txn.journal_entry_id is None

    expense = by_amount[Decimal("-42.50")]
    assert expense.suggested_account_id == chart["Office Supplies"].id
    assert expense.confidence_score == 85
    assert expense.raw_csv_line == "01/15/2024,-42.50,*,,STAPLES STORE 123"


def test_import_returns_transactions_in_row_order(import_service, wells_fargo_csv):
    result = import_service.import_csv(wells_fargo_csv, source_type="Bank")

    assert [txn.description for txn in result.transactions] == [
        "STAPLES STORE 123",
        "CLIENT PAYMENT ACME CORP",
    ]


def test_import_without_source_account(import_service, temp_db, wells_fargo_csv):
    result = import_service.import_csv(wells_fargo_csv, source_type="Bank", source_name="Ops")

    assert result.count == 2
    assert all(txn.source_account_id is None for txn in result.transactions)
    assert all(txn.source_name == "Ops" for txn in result.transactions)


def test_empty_upload_rejected(import_service):
    with pytest.raises(ValidationError, match="No file uploaded"):
        import_service.import_csv(b"", source_type="Bank")


def test_blank_csv_rejected(import_service):
    with pytest.raises(ValidationError, match="Empty CSV"):
        import_service.import_csv(b"\n\n,,\n", source_type="Bank")


def test_unknown_source_account_rejected(import_service, wells_fargo_csv):
    with pytest.raises(ValidationError, match="Source account not found"):
        import_service.import_csv(wells_fargo_csv, source_type="Bank", source_account_id="nope")


def test_invalid_source_type_rejected(import_service, wells_fargo_csv):
    with pytest.raises(ValidationError, match="Invalid source type"):
        import_service.import_csv(wells_fargo_csv, source_type="Brokerage")


def test_unknown_format_rejected(import_service, temp_db):
    csv_data = b"Date,Payee,Outflow,Inflow\n2024-01-01,Shop,10.00,\n"

    with pytest.raises(FormatError, match="Unsupported CSV format"):
        import_service.import_csv(csv_data, source_type="Bank")

    assert temp_db.list_bank_transactions() == []


def test_non_utf8_rejected(import_service):
    with pytest.raises(FormatError, match="UTF-8"):
        import_service.import_csv(b"\xff\xfe\x00\x01", source_type="Bank")


def test_rows_with_blank_first_cell_skipped(import_service):
    csv_data = (
        b"Transaction Date,Post Date,Description,Category,Type,Amount,Memo\n"
        b"01/20/2024,01/21/2024,AMAZON MKTPLACE,Shopping,Sale,-19.99,\n"
        b",,,,,,\n"
        b",01/22/2024,ORPHAN,Shopping,Sale,-1.00,\n"
        b"01/23/2024,01/24/2024,ADOBE,Software,Sale,-52.99,\n"
    )

    result = import_service.import_csv(csv_data, source_type="CreditCard")

    assert result.format == "chase"
    assert result.count == 2
    assert [txn.transaction_type for txn in result.transactions] == ["Sale", "Sale"]


def test_ragged_rows_tolerated(import_service):
    csv_data = (
        b"Transaction Date,Posted Date,Card No.,Description,Category,Debit,Credit\n"
        b"2024-01-10,2024-01-11,1234,ADOBE,Software,52.99\n"
        b"2024-01-12,2024-01-13,1234,PAYMENT,Payment,,500.00,extra\n"
    )

    result = import_service.import_csv(csv_data, source_type="CreditCard")

    assert result.format == "capital-one"
    assert [txn.amount for txn in result.transactions] == [Decimal("-52.99"), Decimal("500.00")]
    assert result.transactions[0].card_number == "1234"


def test_row_parse_failure_rejects_whole_upload(import_service, temp_db):
    csv_data = b'"01/15/2024","-42.50","*","","OK"\n"01/16/2024","lots","*","","BAD"\n'

    with pytest.raises(FormatError, match="Row 2"):
        import_service.import_csv(csv_data, source_type="Bank")

    assert temp_db.list_bank_transactions() == []


def test_paging_through_large_file(import_service, temp_db):
    csv_data = wells_fargo_rows(12)

    first = import_service.import_csv(csv_data, source_type="Bank")
    assert first.count == 10
    assert first.total_rows == 12
    assert first.next_offset == 10

    second = import_service.import_csv(csv_data, source_type="Bank", offset=first.next_offset)
    assert second.count == 2
    assert second.next_offset is None
    assert [txn.description for txn in second.transactions] == ["VENDOR 11", "VENDOR 12"]

    assert len(temp_db.list_bank_transactions()) == 12


def test_offset_past_end_imports_nothing(import_service):
    result = import_service.import_csv(wells_fargo_rows(3), source_type="Bank", offset=5)

    assert result.count == 0
    assert result.next_offset is None


def test_negative_offset_rejected(import_service, wells_fargo_csv):
    with pytest.raises(ValidationError):
        import_service.import_csv(wells_fargo_csv, source_type="Bank", offset=-1)


def test_ai_failure_still_imports_uncategorized(temp_db, chart, wells_fargo_csv):
    engine = CategorizationEngine(FakeSuggestionClient(default="no idea"))
    service = CSVImportService(temp_db, FakeAccountCatalog(chart.values()), engine)

    result = service.import_csv(wells_fargo_csv, source_type="Bank")

    assert result.count == 2
    for txn in result.transactions:
        assert txn.suggested_category == "Uncategorized"
        assert txn.confidence_score == 0
        assert txn.suggested_account_id is None
        assert txn.suggested_memo == txn.description[:100]


def test_suggested_account_not_in_chart_stays_unset(temp_db, chart, wells_fargo_csv):
    client = FakeSuggestionClient(default=suggestion_reply("Imaginary Account", confidence=60))
    service = CSVImportService(
        temp_db, FakeAccountCatalog(chart.values()), CategorizationEngine(client)
    )

    result = service.import_csv(wells_fargo_csv, source_type="Bank")

    assert all(txn.suggested_account_id is None for txn in result.transactions)
    assert all(txn.suggested_category == "Imaginary Account" for txn in result.transactions)


def test_qbse_rows_use_their_own_category(temp_db, chart):
    client = FakeSuggestionClient()
    service = CSVImportService(
        temp_db, FakeAccountCatalog(chart.values()), CategorizationEngine(client)
    )
    csv_data = (
        b"Date,Bank,Account,Description,Amount,Type,Category,Receipt,Notes,Income streams,Ungrouped\n"
        b"01/05/2024,Chase,Checking,STAPLES,-20.00,Business,Office Supplies,,Toner,,\n"
        b"01/06/2024,Chase,Checking,WHOLE FOODS,-85.10,Personal,Groceries,,,,\n"
    )

    result = service.import_csv(csv_data, source_type="Bank")

    staples, groceries = result.transactions
    assert staples.suggested_account_id == chart["Office Supplies"].id
    assert staples.confidence_score == 100
    assert staples.suggested_memo == "Toner"
    assert staples.status == "Pending"
    assert staples.is_personal is False

    # "Groceries" is not in the chart, so the AI is asked
    assert groceries.is_personal is True
    assert len(client.prompts) == 1
    assert "WHOLE FOODS" in client.prompts[0]


def test_merchant_truncated(import_service):
    description = "A" * 250
    csv_data = f'"01/15/2024","-1.00","*","","{description}"\n'.encode()

    result = import_service.import_csv(csv_data, source_type="Bank")

    txn = result.transactions[0]
    assert txn.description == description
    assert txn.merchant == "A" * 200


def test_persistence_failure_rolls_back_batch(import_service, temp_db, monkeypatch):
    original = SQLAlchemyUnitOfWork.add_bank_transaction
    calls = {"count": 0}

    def failing_add(self, draft):
        calls["count"] += 1
        if calls["count"] == 3:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))
        return original(self, draft)

    monkeypatch.setattr(SQLAlchemyUnitOfWork, "add_bank_transaction", failing_add)

    with pytest.raises(PersistenceError):
        import_service.import_csv(wells_fargo_rows(5), source_type="Bank")

    assert temp_db.list_bank_transactions() == []


def test_account_catalog_failure_propagates(temp_db, wells_fargo_csv):
    class BrokenCatalog(FakeAccountCatalog):
        def list_accounts(self):
            raise ExternalServiceError("Accounts service unavailable")

    service = CSVImportService(
        temp_db, BrokenCatalog([]), CategorizationEngine(FakeSuggestionClient())
    )

    with pytest.raises(ExternalServiceError):
        service.import_csv(wells_fargo_csv, source_type="Bank")


def test_read_csv_records_keeps_line_numbers():
    records = read_csv_records(b"a,b\n\nc,d\n")
    assert records == [(1, ["a", "b"]), (3, ["c", "d"])]
