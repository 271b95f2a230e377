"""Assembly of domain services from settings.

The HTTP app and the CLI both build their collaborators here, so every
entry point sees the same database, account catalog, suggestion client
and training corpus.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ledgerflow.clients import (
    AccountCatalog,
    ChatCompletionClient,
    DatabaseAccountCatalog,
    DisabledSuggestionClient,
    HttpAccountCatalog,
    SuggestionClient,
)
from ledgerflow.config import Settings
from ledgerflow.database import Database, create_database, create_sqlite_database
from ledgerflow.domain.categorization import CategorizationEngine
from ledgerflow.domain.csv_import import CSVImportService
from ledgerflow.domain.maintenance import MaintenanceService
from ledgerflow.domain.posting import PostingService
from ledgerflow.domain.review import ReviewService
from ledgerflow.domain.training import TrainingCorpus, load_training_corpus

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Long-lived collaborators shared by all requests of one process."""

    db: Database
    account_catalog: AccountCatalog
    suggestion_client: SuggestionClient
    corpus: TrainingCorpus
    import_service: CSVImportService
    posting_service: PostingService
    review_service: ReviewService
    maintenance_service: MaintenanceService

    def close(self) -> None:
        """Close HTTP clients and release pooled database connections."""
        self.suggestion_client.close()
        self.account_catalog.close()
        self.db.disconnect()


def database_from_settings(settings: Settings) -> Database:
    """Create the database named by the settings (URL first, then file path)."""
    if settings.database_url:
        return create_database(settings.database_url)
    if settings.database_path:
        return create_sqlite_database(settings.database_path)
    return create_database()


def build_services(
    settings: Settings,
    db: Optional[Database] = None,
    account_catalog: Optional[AccountCatalog] = None,
    suggestion_client: Optional[SuggestionClient] = None,
    corpus: Optional[TrainingCorpus] = None,
) -> Services:
    """Build every service, loading the training corpus before returning.

    Collaborators passed in explicitly are used as-is; the rest are
    created from settings.

    Args:
        settings: Application settings
        db: Database to use instead of the configured one
        account_catalog: Chart-of-accounts source
        suggestion_client: AI suggestion service
        corpus: Training corpus

    Returns:
        Services ready to handle requests
    """
    if db is None:
        db = database_from_settings(settings)

    if account_catalog is None:
        if settings.accounts_api_url:
            account_catalog = HttpAccountCatalog(
                settings.accounts_api_url, timeout_seconds=settings.ai_timeout_seconds
            )
        else:
            account_catalog = DatabaseAccountCatalog(db)

    if suggestion_client is None:
        if settings.ai_enabled:
            suggestion_client = ChatCompletionClient(
                endpoint=settings.ai_endpoint,
                api_key=settings.ai_api_key,
                deployment=settings.ai_deployment,
                api_version=settings.ai_api_version,
                timeout_seconds=settings.ai_timeout_seconds,
            )
        else:
            logger.warning("AI_ENDPOINT or AI_API_KEY not set; every import row will be Uncategorized")
            suggestion_client = DisabledSuggestionClient()

    if corpus is None:
        corpus = load_training_corpus(settings.training_data_path)

    engine = CategorizationEngine(suggestion_client, corpus)
    return Services(
        db=db,
        account_catalog=account_catalog,
        suggestion_client=suggestion_client,
        corpus=corpus,
        import_service=CSVImportService(
            db,
            account_catalog,
            engine,
            batch_size=settings.import_batch_size,
            max_workers=settings.categorization_workers,
        ),
        posting_service=PostingService(db),
        review_service=ReviewService(db),
        maintenance_service=MaintenanceService(db),
    )
