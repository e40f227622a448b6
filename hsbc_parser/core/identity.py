"""
Content hashing for transaction identity.
"""
import hashlib
import struct
from datetime import date
from decimal import Decimal

from ..models.schema import date_to_epoch


def transaction_id(txn_date: date, details: str, amount: Decimal) -> str:
    """
    Hash the fields that identify a transaction across runs.

    The date enters as big-endian signed 64-bit epoch seconds (midnight UTC),
    followed by the UTF-8 details and the amount's decimal string.
    """
    h = hashlib.sha256()
    h.update(struct.pack(">q", date_to_epoch(txn_date)))
    h.update(details.encode("utf-8"))
    h.update(str(amount).encode("utf-8"))
    return h.hexdigest()
