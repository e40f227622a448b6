"""
End-to-end parsing orchestration.
"""
from datetime import date
from pathlib import Path
from typing import List, Optional
import logging

from .aggregator import StatementBuilder
from .categorizer import Categorizer
from .errors import StructuralError
from .identity import transaction_id
from .profiles import DEFAULT_PROFILE, load_profile
from .recognizer import TransactionRecognizer
from .streams import StreamDecompressor, StreamExtractor
from ..models.schema import Category, Statement, Transaction

logger = logging.getLogger(__name__)


class StatementParser:
    """Main parser class that orchestrates the entire parsing process."""

    def __init__(self, categories: Optional[List[Category]] = None,
                 reference_year: Optional[int] = None,
                 profile_id: str = DEFAULT_PROFILE, verbose: bool = False):
        self.profile = load_profile(profile_id)
        self.categorizer = Categorizer(categories)
        self.reference_year = reference_year
        self.extractor = StreamExtractor()
        self.decompressor = StreamDecompressor()

        if verbose:
            logging.basicConfig(level=logging.DEBUG)

    def parse(self, data: bytes) -> Statement:
        """
        Parse statement bytes into a reconciled ledger.

        Args:
            data: Complete document contents

        Returns:
            Statement object

        Raises:
            StructuralError: if the stream framing is broken; the ledger built
                from the streams before the break is attached as ``statement``
        """
        try:
            streams = self.extractor.extract(data)
        except StructuralError as e:
            logger.error(f"Structural error after {len(e.streams)} streams: {e}")
            e.statement = self._build_statement(e.streams)
            raise

        return self._build_statement(streams)

    def parse_file(self, pdf_path: Path) -> Statement:
        """Read a statement file and parse it."""
        return self.parse(Path(pdf_path).read_bytes())

    def _build_statement(self, streams: List[bytes]) -> Statement:
        year = self.reference_year
        if year is None:
            year = date.today().year
            logger.debug(f"No reference year given, assuming {year}")

        recognizer = TransactionRecognizer(self.profile, year)
        builder = StatementBuilder()

        for buffer in self.decompressor.decompress_all(streams):
            for scanned in recognizer.scan_transactions(buffer):
                transaction = Transaction(
                    date=scanned.date,
                    details=scanned.details,
                    amount=scanned.amount,
                )
                transaction.id = transaction_id(transaction.date, transaction.details, transaction.amount)
                self.categorizer.assign(transaction)
                builder.add_transaction(transaction, scanned.is_credit)

            summary = recognizer.scan_summary(buffer)
            if summary is not None:
                builder.set_summary(summary)

        statement = builder.build()
        logger.info(
            f"Parsed {len(statement.credits)} credits and {len(statement.debits)} debits "
            f"from {len(streams)} streams"
        )
        if not statement.validate_totals():
            logger.warning(
                f"Statement does not reconcile: declared credits {statement.total_credits}, "
                f"debits {statement.total_debits}"
            )
        return statement


def parse_statement(data: bytes, categories: Optional[List[Category]] = None,
                    reference_year: Optional[int] = None,
                    profile_id: str = DEFAULT_PROFILE, verbose: bool = False) -> Statement:
    """
    Parse an HSBC credit card statement.

    Args:
        data: Raw document bytes
        categories: Category store, in match priority order
        reference_year: Year for the day/month dates; defaults to the current year
        profile_id: Vendor profile to use
        verbose: Enable verbose logging

    Returns:
        Statement object
    """
    parser = StatementParser(categories, reference_year, profile_id, verbose)
    return parser.parse(data)
