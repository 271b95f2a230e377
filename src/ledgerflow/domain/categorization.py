"""Categorization of imported transactions against the chart of accounts.

The engine combines a similarity search over the training corpus with one
call to the AI suggestion service. Categorization is a total function:
whatever goes wrong, the caller receives a result, at worst the
zero-confidence fallback.
"""

import logging
from typing import Any, Optional, Sequence

from ledgerflow.clients.suggestions import SuggestionClient
from ledgerflow.domain.entities import (
    Account,
    CategorizationResult,
    NormalizedTransaction,
    SourceContext,
    TrainingExample,
)
from ledgerflow.domain.errors import CategorizationFailure
from ledgerflow.domain.training import TrainingCorpus
from ledgerflow.utils.json_extract import extract_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an accounting AI assistant. Always respond with valid JSON only."

RESPONSE_TEMPLATE = """{
  "accountName": "exact account name from list",
  "category": "category name",
  "memo": "brief description",
  "confidence": 85
}"""


def build_prompt(
    transaction: NormalizedTransaction,
    accounts: Sequence[Account],
    source: SourceContext,
    examples: Sequence[TrainingExample] = (),
) -> str:
    """Build the classification request sent to the suggestion service."""
    direction = "(expense)" if transaction.amount < 0 else "(income)"
    lines = [
        "Analyze this transaction and suggest the appropriate accounting category:",
        "",
        f"Transaction: {transaction.description}",
        f"Amount: ${abs(transaction.amount):.2f} {direction}",
        f"Date: {transaction.transaction_date.isoformat()}",
        f"Source: {source.label}",
    ]
    if transaction.original_category:
        lines.append(f"Bank Category: {transaction.original_category}")

    if examples:
        lines.extend(["", "Similar past transactions from QuickBooks:"])
        lines.extend(f'- "{ex.description}" → {ex.category}' for ex in examples)

    lines.extend(["", "Available accounts:"])
    lines.extend(f"- {account.name} ({account.type})" for account in accounts)

    lines.extend(
        [
            "",
            "Based on the description and similar past transactions, suggest:",
            "1. Best matching account from the list above",
            "2. Brief memo for journal entry",
            "3. Confidence score (0-100)",
            "",
            "Respond ONLY with valid JSON:",
            RESPONSE_TEMPLATE,
        ]
    )
    return "\n".join(lines)


def _coerce_confidence(value: Any) -> int:
    if isinstance(value, bool):
        raise CategorizationFailure(f"Invalid confidence {value!r}")
    try:
        confidence = int(round(float(value)))
    except (TypeError, ValueError, OverflowError) as e:
        raise CategorizationFailure(f"Invalid confidence {value!r}") from e
    return max(0, min(100, confidence))


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_suggestion(content: str, description: str) -> CategorizationResult:
    """Turn a free-text reply into a categorization result.

    Raises:
        CategorizationFailure: If no JSON object is found or the confidence
            is not a number
    """
    try:
        data = extract_json_object(content)
    except ValueError as e:
        raise CategorizationFailure(str(e)) from e

    return CategorizationResult(
        account_name=_optional_text(data.get("accountName")),
        category=_optional_text(data.get("category")) or "Uncategorized",
        memo=_optional_text(data.get("memo")) or description[:100],
        confidence=_coerce_confidence(data.get("confidence", 0)),
    )


def resolve_account_id(account_name: Optional[str], accounts: Sequence[Account]) -> Optional[str]:
    """Resolve an account name by exact match; None when nothing matches."""
    if not account_name:
        return None
    for account in accounts:
        if account.name == account_name:
            return account.id
    return None


class CategorizationEngine:
    """Suggests an account, category and memo for normalized transactions."""

    def __init__(self, client: SuggestionClient, corpus: Optional[TrainingCorpus] = None):
        """Initialize categorization engine.

        Args:
            client: AI suggestion service
            corpus: Labeled historical transactions used as hints
        """
        self.client = client
        self.corpus = corpus if corpus is not None else TrainingCorpus()

    def categorize(
        self,
        transaction: NormalizedTransaction,
        accounts: Sequence[Account],
        source: SourceContext,
    ) -> CategorizationResult:
        """Categorize one transaction.

        Never raises: failures of the similarity search, the service call or
        the reply parsing all resolve to :meth:`CategorizationResult.fallback`.
        """
        try:
            examples = self.corpus.find_similar(transaction.description)
            prompt = build_prompt(transaction, accounts, source, examples)
            content = self.client.complete(SYSTEM_PROMPT, prompt)
            return parse_suggestion(content, transaction.description)
        except CategorizationFailure as e:
            logger.warning("Categorization fell back to Uncategorized: %s", e)
        except Exception:
            logger.exception("Unexpected categorization error")
        return CategorizationResult.fallback(transaction.description)
