"""
Accumulation of recognized records into a statement ledger.
"""
from decimal import Decimal
from typing import List, Optional
import logging

from .recognizer import SummaryTotals
from ..models.schema import Statement, Transaction

logger = logging.getLogger(__name__)


class StatementBuilder:
    """Collects transactions and summary totals across content streams."""

    def __init__(self):
        self.credits: List[Transaction] = []
        self.debits: List[Transaction] = []
        self.summary: Optional[SummaryTotals] = None

    def add_transaction(self, transaction: Transaction, is_credit: bool):
        """Append a transaction to the credits or debits, keeping document order."""
        if is_credit:
            self.credits.append(transaction)
        else:
            self.debits.append(transaction)

    def set_summary(self, summary: SummaryTotals):
        """Record the declared totals; the first summary in the document wins."""
        if self.summary is not None:
            if summary != self.summary:
                logger.warning(f"Ignoring additional summary {summary}, already have {self.summary}")
            return
        self.summary = summary

    def build(self) -> Statement:
        """Create the statement and its category overview."""
        if self.summary is None:
            logger.warning("No summary totals found; declared totals default to 0.00")

        statement = Statement(
            total_credits=self.summary.total_credits if self.summary else Decimal('0.00'),
            total_debits=self.summary.total_debits if self.summary else Decimal('0.00'),
            credits=list(self.credits),
            debits=list(self.debits),
        )
        statement.calculate_category_overview()
        return statement
