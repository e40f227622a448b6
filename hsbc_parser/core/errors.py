"""
Exception types raised while extracting a statement.
"""
from typing import List, Optional


class StatementParseError(Exception):
    """Base class for statement parsing failures."""


class StructuralError(StatementParseError):
    """
    The document does not follow the expected stream container convention.

    Raised when a stream length declaration cannot be parsed or a stream body
    cannot be located. Streams extracted before the failure are kept on
    ``streams`` and, once the parser has processed them, the partial ledger is
    attached as ``statement``.
    """

    def __init__(self, message: str, offset: int, streams: Optional[List[bytes]] = None):
        super().__init__(message)
        self.offset = offset
        self.streams = streams or []
        self.statement = None


class AmountFormatError(StatementParseError, ValueError):
    """A byte run does not have the shape of a monetary amount."""

    def __init__(self, raw):
        super().__init__(f"Not an amount: {raw!r}")
        self.raw = raw
