"""Utility functions for ledgerflow."""

from ledgerflow.utils.date_parser import parse_date
from ledgerflow.utils.amount_parser import parse_amount, is_number
from ledgerflow.utils.json_extract import extract_json_object

__all__ = ["parse_date", "parse_amount", "is_number", "extract_json_object"]
