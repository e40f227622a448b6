"""
HSBC Credit Card Statement Parser

Extracts a reconciled, categorized transaction ledger from HSBC credit card
statement PDFs by scanning their content streams directly.
"""

__version__ = "1.0.0"

from .core.runner import StatementParser, parse_statement
from .core.errors import StatementParseError, StructuralError, AmountFormatError
from .models.schema import Statement, Transaction, Category, CategoryOverview, StatementProfile

__all__ = [
    "StatementParser",
    "parse_statement",
    "StatementParseError",
    "StructuralError",
    "AmountFormatError",
    "Statement",
    "Transaction",
    "Category",
    "CategoryOverview",
    "StatementProfile"
]
