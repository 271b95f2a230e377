"""Review domain service.

Moves imported transactions out of Pending. Approved rows become eligible
for posting; Rejected rows are terminal.
"""

import logging
from typing import Optional

from ledgerflow.database.base import Database, UnitOfWork
from ledgerflow.domain.entities import BankTransaction, TransactionStatus
from ledgerflow.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    illegal_transition,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_THRESHOLD = 80


class ReviewService:
    """Service for approving and rejecting imported transactions."""

    def __init__(self, db: Database):
        """Initialize review service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_transactions(
        self, status: Optional[str] = None, min_confidence: Optional[int] = None
    ) -> list[BankTransaction]:
        """List bank transactions, optionally filtered by status and confidence."""
        if status is not None and status not in {s.value for s in TransactionStatus}:
            raise ValidationError(f"Invalid status '{status}'")
        return self.db.list_bank_transactions(status=status, min_confidence=min_confidence)

    def approve(
        self,
        transaction_id: str,
        account_id: Optional[str] = None,
        category: Optional[str] = None,
        memo: Optional[str] = None,
        is_personal: Optional[bool] = None,
    ) -> BankTransaction:
        """Approve a Pending transaction.

        Suggested account, category and memo are copied into the approval
        fields unless overridden.

        Raises:
            NotFoundError: If the transaction or override account does not exist
            ConflictError: If the transaction is not Pending
        """
        with self.db.unit_of_work() as uow:
            return self._approve(uow, transaction_id, account_id, category, memo, is_personal)

    def reject(self, transaction_id: str) -> BankTransaction:
        """Reject a Pending transaction.

        Raises:
            NotFoundError: If the transaction does not exist
            ConflictError: If the transaction is not Pending
        """
        with self.db.unit_of_work() as uow:
            self._pending(uow, transaction_id, TransactionStatus.REJECTED)
            return uow.update_review(transaction_id, TransactionStatus.REJECTED.value)

    def approve_high_confidence(
        self, threshold: int = HIGH_CONFIDENCE_THRESHOLD
    ) -> list[BankTransaction]:
        """Approve every Pending transaction whose confidence meets the threshold.

        Returns:
            The approved transactions
        """
        if not 0 <= threshold <= 100:
            raise ValidationError("Threshold must be between 0 and 100")

        with self.db.unit_of_work() as uow:
            candidates = uow.list_bank_transactions(
                status=TransactionStatus.PENDING.value, min_confidence=threshold
            )
            approved = [self._approve(uow, txn.id) for txn in candidates]

        logger.info("Approved %d transactions at confidence >= %d", len(approved), threshold)
        return approved

    def _approve(
        self,
        uow: UnitOfWork,
        transaction_id: str,
        account_id: Optional[str] = None,
        category: Optional[str] = None,
        memo: Optional[str] = None,
        is_personal: Optional[bool] = None,
    ) -> BankTransaction:
        txn = self._pending(uow, transaction_id, TransactionStatus.APPROVED)
        if account_id is not None and uow.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        return uow.update_review(
            transaction_id,
            TransactionStatus.APPROVED.value,
            approved_account_id=account_id or txn.suggested_account_id,
            approved_category=category or txn.suggested_category,
            approved_memo=memo or txn.suggested_memo,
            is_personal=is_personal,
        )

    @staticmethod
    def _pending(
        uow: UnitOfWork, transaction_id: str, target: TransactionStatus
    ) -> BankTransaction:
        txn = uow.lock_bank_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.status != TransactionStatus.PENDING:
            raise ConflictError(illegal_transition(transaction_id, txn.status, target.value))
        return txn
