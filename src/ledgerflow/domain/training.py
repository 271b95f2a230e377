"""Historical labeled transactions used as categorization hints."""

import csv
import logging
from pathlib import Path
from typing import Iterable, Optional

from ledgerflow.domain.entities import TrainingExample

logger = logging.getLogger(__name__)

SIMILARITY_PREFIX_LENGTH = 15
MAX_SIMILAR_EXAMPLES = 5


class TrainingCorpus:
    """Immutable collection of labeled transactions.

    Loaded once before the service accepts traffic and shared read-only
    between requests and worker threads.
    """

    def __init__(self, examples: Iterable[TrainingExample] = ()):
        self._examples: tuple[TrainingExample, ...] = tuple(examples)

    def __len__(self) -> int:
        return len(self._examples)

    def __iter__(self):
        return iter(self._examples)

    def find_similar(
        self, description: str, limit: int = MAX_SIMILAR_EXAMPLES
    ) -> list[TrainingExample]:
        """Find examples whose description resembles ``description``.

        An example matches when its description, case-insensitively,
        contains the first 15 characters of ``description`` or is itself
        contained in ``description``. A blank description matches nothing.
        """
        needle = description.lower()
        if not needle.strip():
            return []
        prefix = needle[:SIMILARITY_PREFIX_LENGTH]

        matches = []
        for example in self._examples:
            candidate = example.description.lower()
            if prefix in candidate or candidate in needle:
                matches.append(example)
                if len(matches) >= limit:
                    break
        return matches


def load_training_corpus(path: Optional[str]) -> TrainingCorpus:
    """Load a QuickBooks Self-Employed export as a training corpus.

    Rows without a description, without a category or still marked
    ``Unreviewed`` are dropped. A missing file yields an empty corpus.

    Args:
        path: Path to a CSV with ``Description`` and ``Category`` columns

    Returns:
        Loaded corpus
    """
    if not path:
        logger.info("No training data configured, continuing without it")
        return TrainingCorpus()

    csv_path = Path(path)
    if not csv_path.exists():
        logger.info("Training data not found at %s, continuing without it", csv_path)
        return TrainingCorpus()

    examples = []
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            description = (row.get("Description") or "").strip()
            category = (row.get("Category") or "").strip()
            if not description or not category or category == "Unreviewed":
                continue
            examples.append(TrainingExample(description=description, category=category))

    logger.info("Loaded %d training transactions from %s", len(examples), csv_path)
    return TrainingCorpus(examples)
