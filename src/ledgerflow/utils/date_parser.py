"""Date parsing utilities."""

from datetime import date
from typing import Optional
from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string from a bank export into a date object.

    Exports use month-first dates ("01/15/2024") or ISO dates
    ("2024-01-15"); anything dateutil understands is accepted.

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")

    date_str = date_str.strip()
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_optional_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a date string, returning None for blank input."""
    if date_str is None or not date_str.strip():
        return None
    return parse_date(date_str)
