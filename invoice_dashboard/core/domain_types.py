"""Domain Types — enums that replace bare strings across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders and compare equal to
      the raw column values SQLAlchemy returns
"""

from enum import Enum


class InvoiceStatus(str, Enum):
    """Invoice payment states — maps to DB `status` column."""
    PAID = "paid"
    PENDING = "pending"


class CacheTag(str, Enum):
    """Tags registered by the cross-request cache. Revalidated externally."""
    INVOICE_PAGES = "i-p"
