"""
Categorization of transactions against a user-maintained category store.
"""
from pathlib import Path
from typing import Iterable, List, Optional
import logging

from pydantic import TypeAdapter

from ..models.schema import Category, Transaction, UNKNOWN_CATEGORY

logger = logging.getLogger(__name__)

_STORE = TypeAdapter(List[Category])


class Categorizer:
    """Assigns the first matching category, in store order."""

    def __init__(self, categories: Optional[List[Category]] = None):
        self.categories = list(categories or [])

    def categorize(self, details: str) -> str:
        """
        Pick a category name for a transaction description.

        Args:
            details: Cleaned merchant description

        Returns:
            Name of the first matching category, or ``Unknown``
        """
        for category in self.categories:
            if category.is_match(details):
                return category.name
        return UNKNOWN_CATEGORY

    def assign(self, transaction: Transaction) -> Transaction:
        """Set the transaction's category in place."""
        transaction.category = self.categorize(transaction.details)
        return transaction


def load_categories(path: Path) -> List[Category]:
    """
    Load the category store from a JSON array of ``{name, patterns}``.

    A missing or empty file is an empty store.
    """
    if not path.exists():
        logger.debug(f"Category file not found, starting empty: {path}")
        return []

    content = path.read_text(encoding="utf-8")
    if not content.strip():
        return []

    categories = _STORE.validate_json(content)
    logger.info(f"Loaded {len(categories)} categories from {path}")
    return categories


def save_categories(path: Path, categories: List[Category]) -> None:
    """Write the category store, keeping its order."""
    path.write_bytes(_STORE.dump_json(categories, indent=2))
    logger.info(f"Saved {len(categories)} categories to {path}")


def learn_categories(categories: List[Category], transactions: Iterable[Transaction]) -> int:
    """
    Record unmatched merchants under the ``Unknown`` category.

    Every transaction that no category matches has its details added as a new
    pattern of ``Unknown``, which is created at the end of the store when
    missing. The store is modified in place.

    Returns:
        Number of patterns added
    """
    added = 0

    for transaction in transactions:
        if any(category.is_match(transaction.details) for category in categories):
            continue

        unknown = next((c for c in categories if c.name == UNKNOWN_CATEGORY), None)
        if unknown is None:
            categories.append(Category(name=UNKNOWN_CATEGORY, patterns=[transaction.details]))
        else:
            unknown.patterns.append(transaction.details)
        added += 1
        logger.debug(f"Learned pattern: {transaction.details}")

    return added
