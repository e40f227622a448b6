"""
Tests for transaction and summary recognition in content streams.
"""
import logging
import pytest
from datetime import date
from decimal import Decimal

from ..core.recognizer import ScannedTransaction, SummaryTotals, TransactionRecognizer
from ..models.schema import StatementProfile, SummaryLabels
from .conftest import text_row


class TestTransactionRecognizer:
    """Test cases for the resynchronizing transaction scan."""

    @pytest.fixture
    def recognizer(self):
        return TransactionRecognizer(reference_year=2019)

    def test_foreign_currency_credit(self, recognizer, hobbs_row):
        """Second date, cleaned details and the local amount are kept."""
        transactions = recognizer.scan_transactions(hobbs_row)

        assert transactions == [
            ScannedTransaction(
                date=date(2019, 8, 22),
                details="HOBBS OF HURST",
                amount=Decimal("139.50"),
                is_credit=True,
            )
        ]

    def test_local_debit(self, recognizer, tesco_row):
        (transaction,) = recognizer.scan_transactions(tesco_row)

        assert transaction.date == date(2019, 9, 2)
        assert transaction.details == "TESCO STORES LONDON"
        assert transaction.amount == Decimal("1204.75")
        assert transaction.is_credit is False

    def test_noise_between_records(self, recognizer, hobbs_row, tesco_row):
        """Unrelated bytes before, between and after records are skipped."""
        buffer = (
            b"\x00\xff garbage ((( )) [(  )] TJ 12 TL (01JAN) (HEADER) (9.99)\n"
            + hobbs_row
            + b"q 1 0 0 1 72 720 cm (Page 1 of 3) Tj Q (CR) (05SEP) \xde\xad"
            + tesco_row
            + b"(31DEC)Tj (30DEC) ET \x89PNG (12.00"
        )

        transactions = recognizer.scan_transactions(buffer)

        assert [t.details for t in transactions] == ["HOBBS OF HURST", "TESCO STORES LONDON"]
        assert [t.is_credit for t in transactions] == [True, False]

    def test_resynchronizes_inside_date_run(self, recognizer):
        """A stray date before a record does not swallow the record."""
        buffer = text_row("01JAN", "02JAN", "05JAN", "SHOP", "10.00")

        (transaction,) = recognizer.scan_transactions(buffer)

        assert transaction.date == date(2019, 1, 5)
        assert transaction.details == "SHOP"

    def test_credit_marker_not_borrowed(self, recognizer):
        """A CR further on belongs to the record it follows, not an earlier one."""
        buffer = text_row("01MAR", "01MAR", "ACME", "5.00") + text_row(
            "02MAR", "02MAR", "REFUND CO", "7.25", "CR"
        )

        first, second = recognizer.scan_transactions(buffer)

        assert first.is_credit is False
        assert second.is_credit is True

    def test_payment_marker_skipped(self, recognizer):
        buffer = text_row("10OCT", "09OCT", "APPLE PAY", "CARREFOUR CITY CENTRE    AE", "AE", "250.00")

        (transaction,) = recognizer.scan_transactions(buffer)

        assert transaction.details == "CARREFOUR CITY CENTRE"
        assert transaction.amount == Decimal("250.00")

    def test_blank_spacer_between_fields(self, recognizer):
        buffer = b"(07AUG)Tj [(  )] TJ (06AUG)Tj (SUN AND SAND SPORTS ST DUBAI         AE)Tj (399.00)Tj"

        (transaction,) = recognizer.scan_transactions(buffer)

        assert transaction.date == date(2019, 8, 6)
        assert transaction.details == "SUN AND SAND SPORTS ST DUBAI"

    def test_leap_day_in_common_year_is_kept(self, caplog):
        buffer = text_row("01MAR", "29FEB", "LEAP SHOP", "10.00") + text_row(
            "01MAR", "01MAR", "NEXT", "5.00")

        with caplog.at_level(logging.WARNING):
            transactions = TransactionRecognizer(reference_year=2026).scan_transactions(buffer)

        assert [t.details for t in transactions] == ["LEAP SHOP", "NEXT"]
        assert transactions[0].date == date(2026, 2, 28)
        assert "29FEB does not exist in 2026" in caplog.text

    def test_day_zero_rejected(self, recognizer):
        buffer = text_row("00FEB", "00FEB", "NOWHERE", "1.00")

        assert recognizer.scan_transactions(buffer) == []

    def test_malformed_amount_is_local_failure(self, recognizer, tesco_row):
        buffer = text_row("01MAR", "01MAR", "BROKEN", "12.5") + tesco_row

        transactions = recognizer.scan_transactions(buffer)

        assert [t.details for t in transactions] == ["TESCO STORES LONDON"]

    def test_escaped_description(self, recognizer):
        buffer = rb"(01APR)Tj (01APR)Tj (MARKS \(AND\) SPENCER)Tj (20.00)Tj"

        (transaction,) = recognizer.scan_transactions(buffer)

        assert transaction.details == "MARKS (AND) SPENCER"

    def test_nested_parentheses_description(self, recognizer):
        """Balanced parentheses inside a literal need no escaping."""
        buffer = b"(01APR)Tj (01APR)Tj (MARKS (AND) SPENCER)Tj (20.00)Tj"

        (transaction,) = recognizer.scan_transactions(buffer)

        assert transaction.details == "MARKS (AND) SPENCER"
        assert transaction.amount == Decimal("20.00")

    def test_unclosed_literal(self, recognizer, tesco_row):
        buffer = tesco_row + b"(01APR)Tj (01APR)Tj (NEVER (CLOSED)Tj (20.00)Tj"

        transactions = recognizer.scan_transactions(buffer)

        assert [t.details for t in transactions] == ["TESCO STORES LONDON"]

    def test_empty_and_noise_buffers(self, recognizer):
        assert recognizer.scan_transactions(b"") == []
        assert recognizer.scan_transactions(b"\x78\x9c\x00\x01 random bytes (x) (") == []

    def test_default_year_is_current(self, hobbs_row, caplog):
        with caplog.at_level(logging.DEBUG):
            recognizer = TransactionRecognizer()
        (transaction,) = recognizer.scan_transactions(hobbs_row)

        assert transaction.date.year == date.today().year
        assert f"No reference year given, assuming {date.today().year}" in caplog.text


class TestSummaryRecognition:
    """Test cases for the declared totals line."""

    @pytest.fixture
    def recognizer(self):
        return TransactionRecognizer(reference_year=2019)

    def test_summary_totals(self, recognizer, summary_row):
        buffer = b"BT (Account Summary) Tj\n" + summary_row + b"ET"

        assert recognizer.scan_summary(buffer) == SummaryTotals(
            total_credits=Decimal("139.50"),
            total_debits=Decimal("1204.75"),
        )

    def test_first_summary_wins(self, recognizer, summary_row):
        buffer = summary_row + text_row("Total Credits", "1.00", "Total Debits", "2.00")

        assert recognizer.scan_summary(buffer).total_credits == Decimal("139.50")

    def test_summary_independent_of_transactions(self, recognizer, hobbs_row, summary_row):
        buffer = hobbs_row + summary_row

        assert len(recognizer.scan_transactions(buffer)) == 1
        assert recognizer.scan_summary(buffer) is not None

    def test_incomplete_summary(self, recognizer):
        buffer = text_row("Total Credits", "139.50", "Total Debits")

        assert recognizer.scan_summary(buffer) is None

    def test_profile_labels(self):
        profile = StatementProfile(summary=SummaryLabels(credits_label="Credits", debits_label="Debits"))
        recognizer = TransactionRecognizer(profile, 2019)

        totals = recognizer.scan_summary(text_row("Credits", "0.00", "Debits", "10.00"))

        assert totals == SummaryTotals(Decimal("0.00"), Decimal("10.00"))
