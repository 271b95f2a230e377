"""Clients for the external collaborators of the import and posting core."""

from ledgerflow.clients.accounts import (
    AccountCatalog,
    DatabaseAccountCatalog,
    HttpAccountCatalog,
)
from ledgerflow.clients.suggestions import (
    ChatCompletionClient,
    DisabledSuggestionClient,
    SuggestionClient,
)

__all__ = [
    "AccountCatalog",
    "DatabaseAccountCatalog",
    "HttpAccountCatalog",
    "ChatCompletionClient",
    "DisabledSuggestionClient",
    "SuggestionClient",
]
