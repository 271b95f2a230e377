"""CSV import domain service.

Orchestrates dialect detection, row parsing, categorization and the
atomic insert of one batch of Pending bank transactions.
"""

import csv
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from ledgerflow.clients.accounts import AccountCatalog
from ledgerflow.database.base import Database
from ledgerflow.domain.categorization import CategorizationEngine, resolve_account_id
from ledgerflow.domain.csv_format import (
    UNKNOWN_FORMAT,
    detect_format,
    has_header,
    parse_transaction,
)
from ledgerflow.domain.entities import (
    Account,
    BankTransactionDraft,
    CategorizationResult,
    ImportResult,
    NormalizedTransaction,
    SourceContext,
    SourceType,
)
from ledgerflow.domain.errors import FormatError, ValidationError, row_error

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
MERCHANT_MAX_LENGTH = 200


def read_csv_records(csv_data: bytes) -> list[tuple[int, list[str]]]:
    """Read every non-blank CSV row, tolerating ragged column counts.

    Returns:
        List of (1-based line number, row) pairs

    Raises:
        FormatError: If the bytes are not UTF-8 text or not CSV
    """
    try:
        text = csv_data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FormatError("CSV file is not valid UTF-8") from e

    records = []
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        for row in reader:
            if any(cell.strip() for cell in row):
                records.append((reader.line_num, row))
    except csv.Error as e:
        raise FormatError(f"Could not read CSV: {e}") from e
    return records


class CSVImportService:
    """Service for importing bank and credit-card CSV exports."""

    def __init__(
        self,
        db: Database,
        account_catalog: AccountCatalog,
        categorization_engine: CategorizationEngine,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = 4,
    ):
        """Initialize CSV import service.

        Args:
            db: Database instance
            account_catalog: Chart-of-accounts source
            categorization_engine: Suggests accounts for parsed rows
            batch_size: Maximum number of data rows processed per request
            max_workers: Threads used to categorize rows concurrently
        """
        self.db = db
        self.account_catalog = account_catalog
        self.categorization_engine = categorization_engine
        self.batch_size = batch_size
        self.max_workers = max_workers

    def import_csv(
        self,
        csv_data: bytes,
        source_type: str,
        source_account_id: Optional[str] = None,
        source_name: Optional[str] = None,
        offset: int = 0,
    ) -> ImportResult:
        """Import one window of transactions from a CSV export.

        Args:
            csv_data: Raw uploaded bytes
            source_type: "Bank" or "CreditCard"
            source_account_id: Chart-of-accounts ID of the bank/card account
            source_name: Display name of the source account
            offset: Index of the first data row to process

        Returns:
            ImportResult with the persisted Pending transactions and the
            offset of the next window, if any rows remain

        Raises:
            ValidationError: Empty upload, unknown source account or type
            FormatError: Unsupported dialect or a row that cannot be parsed
            PersistenceError: The batch insert failed and was rolled back
        """
        if not csv_data:
            raise ValidationError("No file uploaded")

        if not source_type:
            raise ValidationError("Source type is required")
        valid_types = {t.value for t in SourceType}
        if source_type not in valid_types:
            raise ValidationError(
                f"Invalid source type '{source_type}'. "
                f"Must be one of: {', '.join(sorted(valid_types))}"
            )
        if offset < 0:
            raise ValidationError("Offset must not be negative")

        accounts = self.account_catalog.list_accounts()
        source_account = None
        if source_account_id:
            source_account = next((a for a in accounts if a.id == source_account_id), None)
            if source_account is None:
                raise ValidationError("Source account not found")

        records = read_csv_records(csv_data)
        if not records:
            raise ValidationError("Empty CSV file")

        first_row = records[0][1]
        header = has_header(first_row)
        format_name = detect_format(first_row, header)
        if format_name == UNKNOWN_FORMAT:
            raise FormatError("Unsupported CSV format")

        data_rows = records[1:] if header else records
        window_end = offset + self.batch_size
        window = data_rows[offset:window_end]
        next_offset = window_end if window_end < len(data_rows) else None
        if next_offset is not None:
            logger.warning(
                "Processing rows %d-%d of %d; caller must request offset %d for the rest",
                offset,
                window_end - 1,
                len(data_rows),
                next_offset,
            )

        parsed = []
        for line_number, row in window:
            if not row or not row[0].strip():
                continue
            try:
                parsed.append(parse_transaction(row, format_name))
            except FormatError as e:
                raise FormatError(row_error(line_number, str(e))) from e

        source = SourceContext(
            source_type=source_type,
            source_name=source_name or (source_account.name if source_account else None),
        )
        results = self._categorize_all(parsed, accounts, source, format_name)

        drafts = [
            self._build_draft(txn, result, accounts, source, source_account_id)
            for txn, result in zip(parsed, results)
        ]
        with self.db.unit_of_work() as uow:
            transactions = [uow.add_bank_transaction(draft) for draft in drafts]

        logger.info(
            "Imported %d %s transactions (rows %d of %d)",
            len(transactions),
            format_name,
            len(window),
            len(data_rows),
        )
        return ImportResult(
            count=len(transactions),
            format=format_name,
            transactions=transactions,
            total_rows=len(data_rows),
            next_offset=next_offset,
        )

    def _categorize_all(
        self,
        parsed: Sequence[NormalizedTransaction],
        accounts: Sequence[Account],
        source: SourceContext,
        format_name: str,
    ) -> list[CategorizationResult]:
        """Categorize rows concurrently, preserving row order."""
        if not parsed:
            return []

        def categorize(txn: NormalizedTransaction) -> CategorizationResult:
            if format_name == "qbse":
                result = self._precategorized(txn, accounts)
                if result is not None:
                    return result
            return self.categorization_engine.categorize(txn, accounts, source)

        workers = max(1, min(self.max_workers, len(parsed)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(categorize, parsed))

    @staticmethod
    def _precategorized(
        txn: NormalizedTransaction, accounts: Sequence[Account]
    ) -> Optional[CategorizationResult]:
        """QuickBooks rows already carry a category; trust it if it names an account."""
        if not txn.category or resolve_account_id(txn.category, accounts) is None:
            return None
        return CategorizationResult(
            account_name=txn.category,
            category=txn.category,
            memo=txn.notes or txn.description,
            confidence=100,
        )

    @staticmethod
    def _build_draft(
        txn: NormalizedTransaction,
        result: CategorizationResult,
        accounts: Sequence[Account],
        source: SourceContext,
        source_account_id: Optional[str],
    ) -> BankTransactionDraft:
        return BankTransactionDraft(
            source_type=source.source_type,
            source_name=source.source_name,
            source_account_id=source_account_id or None,
            transaction_date=txn.transaction_date,
            post_date=txn.post_date,
            amount=txn.amount,
            description=txn.description,
            merchant=txn.description[:MERCHANT_MAX_LENGTH],
            original_category=txn.original_category,
            transaction_type=txn.transaction_type,
            card_number=txn.card_number,
            raw_csv_line=txn.raw_line,
            suggested_account_id=resolve_account_id(result.account_name, accounts),
            suggested_category=result.category,
            suggested_memo=result.memo,
            confidence_score=result.confidence,
            is_personal=txn.is_personal,
        )
