"""JSON rendering of domain entities in the camelCase shape callers expect."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ledgerflow.domain.entities import BankTransaction, ImportResult


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _money(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def bank_transaction_to_json(txn: BankTransaction) -> dict[str, Any]:
    return {
        "id": txn.id,
        "sourceType": txn.source_type,
        "sourceName": txn.source_name,
        "sourceAccountId": txn.source_account_id,
        "transactionDate": _iso(txn.transaction_date),
        "postDate": _iso(txn.post_date),
        "amount": _money(txn.amount),
        "description": txn.description,
        "merchant": txn.merchant,
        "originalCategory": txn.original_category,
        "transactionType": txn.transaction_type,
        "cardNumber": txn.card_number,
        "rawCsvLine": txn.raw_csv_line,
        "suggestedAccountId": txn.suggested_account_id,
        "suggestedCategory": txn.suggested_category,
        "suggestedMemo": txn.suggested_memo,
        "confidenceScore": txn.confidence_score,
        "status": txn.status,
        "approvedAccountId": txn.approved_account_id,
        "approvedCategory": txn.approved_category,
        "approvedMemo": txn.approved_memo,
        "isPersonal": txn.is_personal,
        "journalEntryId": txn.journal_entry_id,
        "createdAt": _iso(txn.created_at),
    }


def import_result_to_json(result: ImportResult, training_data_count: int) -> dict[str, Any]:
    return {
        "success": True,
        "count": result.count,
        "format": result.format,
        "trainingDataCount": training_data_count,
        "transactions": [bank_transaction_to_json(txn) for txn in result.transactions],
        "totalRows": result.total_rows,
        "nextOffset": result.next_offset,
    }
