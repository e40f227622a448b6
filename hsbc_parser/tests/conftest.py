"""
Fixtures building synthetic statement documents.

Real statements cannot be checked in, so tests draw the same text-show
operators the vendor emits and wrap them in length-prefixed streams.
"""
import zlib
import pytest


def text_row(*fields: str) -> bytes:
    """Draw each field as a literal followed by a positioning operator."""
    return b"".join(
        b"(" + field.encode("latin-1") + b")Tj 1 0 0 1 110.6 538.3 Tm\n"
        for field in fields
    )


def pdf_stream(content: bytes, compress: bool = True) -> bytes:
    """Wrap content in an object with a declared length."""
    payload = zlib.compress(content) if compress else content
    return (
        b"4 0 obj\n<</Length " + str(len(payload)).encode() + b"/Filter/FlateDecode>>\n"
        b"stream\n" + payload + b"\nendstream\nendobj\n"
    )


def pdf_document(*streams: bytes) -> bytes:
    return b"%PDF-1.4\n" + b"".join(streams) + b"trailer\n<</Root 1 0 R>>\n%%EOF\n"


@pytest.fixture
def hobbs_row():
    """Foreign currency credit as drawn on the statement."""
    return text_row("24AUG", "22AUG", "HOBBS OF HURST         HASSOCKS",
                    "GBR", "GBP", "30.03", "139.50", "CR")


@pytest.fixture
def tesco_row():
    """Local debit with a single amount."""
    return text_row("03SEP", "02SEP", "TESCO STORES LONDON         GB", "1,204.75")


@pytest.fixture
def summary_row():
    return text_row("Total Credits", "139.50", "Total Debits", "1,204.75")


@pytest.fixture
def statement_pdf(hobbs_row, tesco_row, summary_row):
    """Two-page statement: header and transactions, then the summary page."""
    page_one = (
        b"BT /F1 9 Tf [(  )] TJ 1 0 0 1 60.2 538.3 Tm\n"
        + text_row("Statement of Account", "Page 1 of 2")
        + hobbs_row
        + b"ET\n"
    )
    # Starts with a stored-block header whose lengths do not check out,
    # so it never inflates
    page_two = b"BT /F1 9 Tf\n" + tesco_row + summary_row + b"ET\n"
    return pdf_document(pdf_stream(page_one), pdf_stream(page_two, compress=False))
