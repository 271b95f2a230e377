"""Ledger maintenance operations."""

import logging

from ledgerflow.database.base import Database

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Destructive housekeeping on ledger data."""

    def __init__(self, db: Database):
        self.db = db

    def reset_ledger(self) -> dict[str, int]:
        """Delete all journal, bank transaction and invoice data.

        Accounts are kept. No confirmation is asked for here.

        Returns:
            Number of deleted rows per table
        """
        with self.db.unit_of_work() as uow:
            deleted = uow.reset_ledger()
        logger.warning(
            "Ledger reset: %s",
            ", ".join(f"{table}={count}" for table, count in deleted.items()),
        )
        return deleted
