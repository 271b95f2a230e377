"""CSV dialect detection and per-dialect row parsing.

Each supported export layout is a :class:`Dialect`: a predicate over the
first CSV row and a parser turning one data row into a
:class:`NormalizedTransaction`. Detection walks :data:`DIALECTS` in order
and the first matching predicate wins, so a new layout is added by
appending a strategy rather than editing the existing ones.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from ledgerflow.domain.entities import NormalizedTransaction
from ledgerflow.domain.errors import FormatError
from ledgerflow.utils.amount_parser import is_number, parse_amount
from ledgerflow.utils.date_parser import parse_date, parse_optional_date

UNKNOWN_FORMAT = "unknown"


@dataclass(frozen=True)
class Dialect:
    """A bank export layout."""

    name: str
    matches: Callable[[list[str], bool], bool]
    parse: Callable[[list[str]], NormalizedTransaction]


def has_header(first_row: list[str]) -> bool:
    """Return True if no cell of the first row reads as a number."""
    return all(not is_number(cell) for cell in first_row)


def _header_text(first_row: list[str]) -> str:
    return ",".join(first_row).lower()


def _cell(row: list[str], index: int) -> Optional[str]:
    """Return a stripped optional cell, None if absent or blank."""
    if index >= len(row):
        return None
    value = row[index].strip()
    return value or None


def _required_cell(row: list[str], index: int, field_name: str) -> str:
    if index >= len(row):
        raise FormatError(f"Missing {field_name} column (expected at position {index + 1})")
    return row[index].strip()


def _date(row: list[str], index: int, field_name: str = "date"):
    value = _required_cell(row, index, field_name)
    try:
        return parse_date(value)
    except ValueError as e:
        raise FormatError(str(e)) from e


def _optional_date(row: list[str], index: int):
    try:
        return parse_optional_date(_cell(row, index))
    except ValueError as e:
        raise FormatError(str(e)) from e


def _amount(value: Optional[str]) -> Decimal:
    try:
        return parse_amount(value or "")
    except ValueError as e:
        raise FormatError(str(e)) from e


def _raw_line(row: list[str]) -> str:
    return ",".join(row)


# Wells Fargo: Date,Amount,*,CheckNo,Description (no header row)
def _matches_wells_fargo(first_row: list[str], header: bool) -> bool:
    return not header and len(first_row) == 5


def _parse_wells_fargo(row: list[str]) -> NormalizedTransaction:
    return NormalizedTransaction(
        transaction_date=_date(row, 0),
        amount=_amount(_required_cell(row, 1, "amount")),
        description=_required_cell(row, 4, "description"),
        raw_line=_raw_line(row),
    )


# Capital One: Transaction Date,Posted Date,Card No.,Description,Category,Debit,Credit
def _matches_capital_one(first_row: list[str], header: bool) -> bool:
    text = _header_text(first_row)
    return header and "debit" in text and "credit" in text and "card no" in text


def _parse_capital_one(row: list[str]) -> NormalizedTransaction:
    debit_str = _cell(row, 5)
    credit_str = _cell(row, 6)
    debit = _amount(debit_str) if debit_str else Decimal("0")
    credit = _amount(credit_str) if credit_str else Decimal("0")
    return NormalizedTransaction(
        transaction_date=_date(row, 0),
        post_date=_optional_date(row, 1),
        card_number=_cell(row, 2),
        description=_required_cell(row, 3, "description"),
        original_category=_cell(row, 4),
        amount=credit if credit > 0 else -debit,
        raw_line=_raw_line(row),
    )


# Chase: Transaction Date,Post Date,Description,Category,Type,Amount,Memo
def _matches_chase(first_row: list[str], header: bool) -> bool:
    text = _header_text(first_row)
    return header and "type" in text and "memo" in text


def _parse_chase(row: list[str]) -> NormalizedTransaction:
    return NormalizedTransaction(
        transaction_date=_date(row, 0),
        post_date=_optional_date(row, 1),
        description=_required_cell(row, 2, "description"),
        original_category=_cell(row, 3),
        transaction_type=_cell(row, 4),
        amount=_amount(_required_cell(row, 5, "amount")),
        raw_line=_raw_line(row),
    )


# QuickBooks Self-Employed:
# Date,Bank,Account,Description,Amount,Type,Category,Receipt,Notes,Income streams,Ungrouped
def _matches_qbse(first_row: list[str], header: bool) -> bool:
    text = _header_text(first_row)
    return (
        header
        and "date" in text
        and "bank" in text
        and "account" in text
        and "income streams" in text
    )


def _parse_qbse(row: list[str]) -> NormalizedTransaction:
    return NormalizedTransaction(
        transaction_date=_date(row, 0),
        amount=_amount(_required_cell(row, 4, "amount")),
        description=_required_cell(row, 3, "description"),
        is_personal=_cell(row, 5) == "Personal",
        category=_cell(row, 6),
        notes=_cell(row, 8),
        raw_line=_raw_line(row),
    )


# Priority order matters: first match wins
DIALECTS: list[Dialect] = [
    Dialect("wells-fargo", _matches_wells_fargo, _parse_wells_fargo),
    Dialect("capital-one", _matches_capital_one, _parse_capital_one),
    Dialect("chase", _matches_chase, _parse_chase),
    Dialect("qbse", _matches_qbse, _parse_qbse),
]


def detect_format(first_row: list[str], header: bool) -> str:
    """Pick the dialect for a CSV from its first row.

    Args:
        first_row: First parsed CSV row
        header: Whether the first row is a header

    Returns:
        Dialect name, or ``"unknown"`` when no rule matches
    """
    for dialect in DIALECTS:
        if dialect.matches(first_row, header):
            return dialect.name
    return UNKNOWN_FORMAT


def get_dialect(format_name: str) -> Dialect:
    """Return the dialect registered under ``format_name``.

    Raises:
        FormatError: If the name is not a supported dialect
    """
    for dialect in DIALECTS:
        if dialect.name == format_name:
            return dialect
    raise FormatError(f"Unknown CSV format '{format_name}'")


def parse_transaction(row: list[str], format_name: str) -> NormalizedTransaction:
    """Parse one data row with the named dialect.

    Raises:
        FormatError: If the dialect is unknown or a field cannot be parsed
    """
    return get_dialect(format_name).parse(row)
