"""
Pydantic models for HSBC credit card statement data.
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_serializer, field_validator

UNKNOWN_CATEGORY = "Unknown"


def date_to_epoch(value: date) -> int:
    """Seconds since the epoch at midnight UTC of ``value``."""
    return int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp())


class Transaction(BaseModel):
    """Individual transaction record."""
    id: Optional[str] = None
    date: date
    details: str
    amount: Decimal
    category: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_epoch_date(cls, v):
        """Accept the epoch-seconds form used in saved statements."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return datetime.fromtimestamp(v, tz=timezone.utc).date()
        return v

    @field_serializer('date')
    def serialize_date(self, v: date) -> int:
        return date_to_epoch(v)


class Category(BaseModel):
    """A named spending category and the description fragments that select it."""
    name: str
    patterns: List[str] = Field(default_factory=list)

    def is_match(self, details: str) -> bool:
        """Check whether any pattern occurs in ``details``, ignoring case."""
        lowered = details.lower()
        return any(pattern.lower() in lowered for pattern in self.patterns)


class CategoryOverview(BaseModel):
    """Per-category roll-up of a statement."""
    name: str
    count: int = 0
    credits: Decimal = Decimal('0.00')
    debits: Decimal = Decimal('0.00')


class Statement(BaseModel):
    """Complete statement data structure."""
    total_credits: Decimal = Decimal('0.00')
    total_debits: Decimal = Decimal('0.00')
    credits: List[Transaction] = Field(default_factory=list)
    debits: List[Transaction] = Field(default_factory=list)
    categories: List[CategoryOverview] = Field(default_factory=list)

    def validate_totals(self) -> bool:
        """
        Check that the transactions add up to the summary totals.

        Returns:
            True if both the credit and debit sums match exactly
        """
        credits = sum((t.amount for t in self.credits), Decimal('0.00'))
        debits = sum((t.amount for t in self.debits), Decimal('0.00'))
        return credits == self.total_credits and debits == self.total_debits

    def get_credits_for_category(self, name: str) -> List[Transaction]:
        return [t for t in self.credits if (t.category or UNKNOWN_CATEGORY) == name]

    def get_debits_for_category(self, name: str) -> List[Transaction]:
        return [t for t in self.debits if (t.category or UNKNOWN_CATEGORY) == name]

    def calculate_category_overview(self) -> List[CategoryOverview]:
        """
        Rebuild the per-category roll-up from the transactions.

        Categories appear in first-seen order, credits before debits.
        """
        overview: Dict[str, CategoryOverview] = {}

        for transaction in self.credits:
            entry = overview.setdefault(
                transaction.category or UNKNOWN_CATEGORY,
                CategoryOverview(name=transaction.category or UNKNOWN_CATEGORY),
            )
            entry.count += 1
            entry.credits += transaction.amount

        for transaction in self.debits:
            entry = overview.setdefault(
                transaction.category or UNKNOWN_CATEGORY,
                CategoryOverview(name=transaction.category or UNKNOWN_CATEGORY),
            )
            entry.count += 1
            entry.debits += transaction.amount

        self.categories = list(overview.values())
        return self.categories


class SummaryLabels(BaseModel):
    """Labels of the cumulative totals line."""
    credits_label: str = "Total Credits"
    debits_label: str = "Total Debits"


class StatementProfile(BaseModel):
    """Text-drawing conventions of one statement vendor."""
    profile_id: str = "hsbc_uae_v1"
    bank: str = "HSBC Bank Middle East"
    currency: str = "AED"
    months: List[str] = Field(default_factory=lambda: [
        "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
        "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
    ])
    payment_markers: List[str] = Field(default_factory=lambda: ["APPLE PAY"])
    credit_marker: str = "CR"
    summary: SummaryLabels = Field(default_factory=SummaryLabels)
    conversions: Dict[str, Decimal] = Field(default_factory=dict)

    @field_validator('months')
    @classmethod
    def validate_months(cls, v):
        """Month abbreviations map to month numbers by position."""
        if len(v) != 12:
            raise ValueError(f"Expected 12 month abbreviations, got {len(v)}")
        return [m.upper() for m in v]
