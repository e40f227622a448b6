"""
Transaction and summary recognition in decompressed content streams.

A content stream draws each table cell with a text-show operator whose
operand is a literal string, for example::

    [(  )] TJ 1 0 0 1 60.2 538.3 Tm
    (07AUG)Tj 1 0 0 1 110.6 538.3 Tm
    (06AUG)Tj 1 0 0 1 150.2 538.3 Tm
    (SUN AND SAND SPORTS ST DUBAI         AE)Tj 1 0 0 1 505.4 538.3 Tm
    (399.00)Tj 1 0 0 1 523.9 538.3 Tm

Records are matched field by field against consecutive literals. Anything that
does not fit is skipped and the scan resumes at the next literal, so page
furniture and layout operators between records are tolerated.
"""
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple
import logging

from .errors import AmountFormatError
from .normalize import clean_description, decode_literal, is_day_month, normalize_amount, normalize_date
from ..models.schema import StatementProfile

logger = logging.getLogger(__name__)

# Operators and blank spacer literals between two fields
_GAP = re.compile(rb"[^(]*(?:\(\s*\)[^(]*)*")
_LOCATION = re.compile(r"[A-Z]{2,3}")


def _read_literal(buffer: bytes, pos: int) -> Optional[Tuple[bytes, int]]:
    """
    Read the literal string opening at ``pos``.

    Balanced parentheses inside a literal need no escaping, so the reader
    tracks nesting depth and skips the byte after every backslash.

    Returns:
        The raw body and the position after the closing parenthesis, or None
        if there is no literal at ``pos`` or it never closes
    """
    if buffer[pos:pos + 1] != b"(":
        return None

    depth = 1
    index = pos + 1
    while index < len(buffer):
        byte = buffer[index]
        if byte == 0x5C:  # backslash
            index += 2
            continue
        if byte == 0x28:
            depth += 1
        elif byte == 0x29:
            depth -= 1
            if depth == 0:
                return buffer[pos + 1:index], index + 1
        index += 1
    return None


@dataclass(frozen=True)
class ScannedTransaction:
    """A transaction as recognized in the content stream."""
    date: date
    details: str
    amount: Decimal
    is_credit: bool


@dataclass(frozen=True)
class SummaryTotals:
    """Cumulative totals declared on the statement."""
    total_credits: Decimal
    total_debits: Decimal


class _Field(NamedTuple):
    text: str
    end: int


class TransactionRecognizer:
    """
    Resynchronizing scanner for transaction and summary records.

    Transaction dates carry no year; ``reference_year`` supplies it and
    defaults to the current calendar year when omitted.
    """

    def __init__(self, profile: Optional[StatementProfile] = None, reference_year: Optional[int] = None):
        self.profile = profile or StatementProfile()
        if reference_year is None:
            reference_year = date.today().year
            logger.debug(f"No reference year given, assuming {reference_year}")
        self.reference_year = reference_year
        self._payment_markers = {m.upper() for m in self.profile.payment_markers}

    def scan_transactions(self, buffer: bytes) -> List[ScannedTransaction]:
        """Recognize every transaction record in a buffer, in document order."""
        transactions = list(self._scan(bytes(buffer), self._match_transaction))
        logger.debug(f"Recognized {len(transactions)} transactions in {len(buffer)} bytes")
        return transactions

    def scan_summary(self, buffer: bytes) -> Optional[SummaryTotals]:
        """Recognize the first summary totals record in a buffer, if any."""
        return next(self._scan(bytes(buffer), self._match_summary), None)

    def _scan(self, buffer: bytes, matcher: Callable) -> Iterator:
        # Every record starts at a literal opener, so bytes up to the next
        # "(" can be discarded in one step.
        pos = buffer.find(b"(")
        while pos != -1:
            result = matcher(buffer, pos)
            if result is None:
                pos = buffer.find(b"(", pos + 1)
                continue

            record, end = result
            yield record
            pos = buffer.find(b"(", end)

    def _field(self, buffer: bytes, pos: int) -> Optional[_Field]:
        """Read one literal and the layout noise that follows it."""
        literal = _read_literal(buffer, pos)
        if literal is None:
            return None
        body, literal_end = literal
        end = _GAP.match(buffer, literal_end).end()
        return _Field(decode_literal(body), end)

    def _amount(self, buffer: bytes, pos: int) -> Optional[Tuple[Decimal, int]]:
        field = self._field(buffer, pos)
        if field is None:
            return None
        try:
            return normalize_amount(field.text), field.end
        except AmountFormatError:
            return None

    def _match_transaction(self, buffer: bytes, pos: int) -> Optional[Tuple[ScannedTransaction, int]]:
        months = self.profile.months

        # Processing date, then transaction date; only the latter is kept
        processed = self._field(buffer, pos)
        if processed is None or not is_day_month(processed.text, months):
            return None
        posted = self._field(buffer, processed.end)
        if posted is None or not is_day_month(posted.text, months):
            return None
        txn_date = normalize_date(posted.text, self.reference_year, months)
        if txn_date is None:
            return None

        field = self._field(buffer, posted.end)
        if field is not None and field.text.strip().upper() in self._payment_markers:
            field = self._field(buffer, field.end)
        if field is None:
            return None

        details = clean_description(field.text)
        if not details:
            return None
        cursor = field.end

        for _ in range(2):
            location = self._field(buffer, cursor)
            if location is None or not _LOCATION.fullmatch(location.text.strip()):
                break
            cursor = location.end

        # Foreign currency rows carry the original amount first; the
        # local-currency amount is the last one
        amounts = []
        while len(amounts) < 2:
            found = self._amount(buffer, cursor)
            if found is None:
                break
            amount, cursor = found
            amounts.append(amount)
        if not amounts:
            return None

        # The credit marker may only be the literal right after the amounts
        is_credit = False
        marker = self._field(buffer, cursor)
        if marker is not None and marker.text.strip() == self.profile.credit_marker:
            is_credit = True
            cursor = marker.end

        transaction = ScannedTransaction(
            date=txn_date,
            details=details,
            amount=amounts[-1],
            is_credit=is_credit,
        )
        logger.debug(f"Matched at {pos}: {transaction}")
        return transaction, cursor

    def _match_summary(self, buffer: bytes, pos: int) -> Optional[Tuple[SummaryTotals, int]]:
        labels = self.profile.summary

        credits_label = self._field(buffer, pos)
        if credits_label is None or credits_label.text.strip() != labels.credits_label:
            return None
        credits = self._amount(buffer, credits_label.end)
        if credits is None:
            return None

        debits_label = self._field(buffer, credits[1])
        if debits_label is None or debits_label.text.strip() != labels.debits_label:
            return None
        debits = self._amount(buffer, debits_label.end)
        if debits is None:
            return None

        totals = SummaryTotals(total_credits=credits[0], total_debits=debits[0])
        logger.debug(f"Summary at {pos}: {totals}")
        return totals, debits[1]
