"""Tests for CSV dialect detection and row parsing."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerflow.domain.csv_format import (
    DIALECTS,
    UNKNOWN_FORMAT,
    detect_format,
    get_dialect,
    has_header,
    parse_transaction,
)
from ledgerflow.domain.errors import FormatError

CHASE_HEADER = ["Transaction Date", "Post Date", "Description", "Category", "Type", "Amount", "Memo"]
CAPITAL_ONE_HEADER = [
    "Transaction Date",
    "Posted Date",
    "Card No.",
    "Description",
    "Category",
    "Debit",
    "Credit",
]
QBSE_HEADER = [
    "Date",
    "Bank",
    "Account",
    "Description",
    "Amount",
    "Type",
    "Category",
    "Receipt",
    "Notes",
    "Income streams",
    "Ungrouped",
]


class TestHeaderDetection:
    """Tests for has_header."""

    def test_all_text_cells_is_header(self):
        assert has_header(CHASE_HEADER) is True

    def test_numeric_cell_means_data_row(self):
        assert has_header(["01/15/2024", "-42.50", "*", "", "STAPLES"]) is False

    def test_integer_cell_means_data_row(self):
        assert has_header(["Date", "100"]) is False


class TestDetectFormat:
    """Tests for detect_format."""

    def test_wells_fargo(self):
        row = ["01/15/2024", "-42.50", "*", "", "STAPLES"]
        assert detect_format(row, has_header(row)) == "wells-fargo"

    def test_capital_one(self):
        assert detect_format(CAPITAL_ONE_HEADER, True) == "capital-one"

    def test_chase(self):
        assert detect_format(CHASE_HEADER, True) == "chase"

    def test_qbse(self):
        assert detect_format(QBSE_HEADER, True) == "qbse"

    def test_header_matching_nothing_is_unknown(self):
        assert detect_format(["Date", "Payee", "Outflow", "Inflow"], True) == UNKNOWN_FORMAT

    def test_headerless_row_with_wrong_width_is_unknown(self):
        row = ["01/15/2024", "-42.50", "STAPLES"]
        assert detect_format(row, has_header(row)) == UNKNOWN_FORMAT

    def test_five_column_header_is_not_wells_fargo(self):
        assert detect_format(["A", "B", "C", "D", "E"], True) == UNKNOWN_FORMAT

    def test_header_text_is_case_insensitive(self):
        header = [cell.upper() for cell in CHASE_HEADER]
        assert detect_format(header, True) == "chase"

    def test_dialect_priority_order(self):
        assert [d.name for d in DIALECTS] == ["wells-fargo", "capital-one", "chase", "qbse"]


class TestParseTransaction:
    """Tests for per-dialect row parsing."""

    def test_wells_fargo_row(self):
        row = ["01/15/2024", "-42.50", "*", "", "STAPLES STORE 123"]
        txn = parse_transaction(row, "wells-fargo")

        assert txn.transaction_date == date(2024, 1, 15)
        assert txn.amount == Decimal("-42.50")
        assert txn.description == "STAPLES STORE 123"
        assert txn.raw_line == "01/15/2024,-42.50,*,,STAPLES STORE 123"
        assert txn.is_personal is False

    def test_capital_one_debit_is_negative(self):
        row = ["2024-01-10", "2024-01-11", "1234", "ADOBE", "Software", "52.99", ""]
        txn = parse_transaction(row, "capital-one")

        assert txn.amount == Decimal("-52.99")
        assert txn.post_date == date(2024, 1, 11)
        assert txn.card_number == "1234"
        assert txn.original_category == "Software"

    def test_capital_one_credit_is_positive(self):
        row = ["2024-01-10", "2024-01-11", "1234", "PAYMENT THANK YOU", "Payment", "", "500.00"]
        txn = parse_transaction(row, "capital-one")

        assert txn.amount == Decimal("500.00")

    def test_capital_one_missing_post_date(self):
        row = ["2024-01-10", "", "1234", "ADOBE", "", "10.00", ""]
        txn = parse_transaction(row, "capital-one")

        assert txn.post_date is None
        assert txn.original_category is None

    def test_chase_row(self):
        row = ["01/20/2024", "01/21/2024", "AMAZON MKTPLACE", "Shopping", "Sale", "-19.99", ""]
        txn = parse_transaction(row, "chase")

        assert txn.transaction_date == date(2024, 1, 20)
        assert txn.post_date == date(2024, 1, 21)
        assert txn.amount == Decimal("-19.99")
        assert txn.original_category == "Shopping"
        assert txn.transaction_type == "Sale"

    def test_qbse_personal_row(self):
        row = [
            "01/05/2024",
            "Chase",
            "Checking",
            "WHOLE FOODS",
            "-85.10",
            "Personal",
            "Groceries",
            "",
            "Weekly shop",
            "",
            "",
        ]
        txn = parse_transaction(row, "qbse")

        assert txn.is_personal is True
        assert txn.category == "Groceries"
        assert txn.notes == "Weekly shop"
        assert txn.amount == Decimal("-85.10")

    def test_qbse_business_row(self):
        row = ["01/05/2024", "Chase", "Checking", "STAPLES", "-20", "Business", "", "", "", "", ""]
        txn = parse_transaction(row, "qbse")

        assert txn.is_personal is False
        assert txn.category is None

    def test_bad_amount_raises(self):
        with pytest.raises(FormatError, match="amount"):
            parse_transaction(["01/15/2024", "abc", "*", "", "X"], "wells-fargo")

    def test_bad_date_raises(self):
        with pytest.raises(FormatError, match="date"):
            parse_transaction(["not a date", "1.00", "*", "", "X"], "wells-fargo")

    def test_short_row_raises(self):
        with pytest.raises(FormatError, match="description"):
            parse_transaction(["01/15/2024", "1.00"], "wells-fargo")

    def test_unknown_dialect_raises(self):
        with pytest.raises(FormatError):
            get_dialect("mint")
