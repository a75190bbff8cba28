"""Currency Formatting — integer cents to display strings and dollar amounts.

Invariants:
    - format_currency is total over int: deterministic en-US USD, two decimals
    - None (SUM over an empty table) formats as zero
    - Amounts stay in cents everywhere else; conversion happens only here
"""

from decimal import Decimal, ROUND_HALF_UP

_CENT = Decimal("0.01")


def _to_dollars(cents: int | str | Decimal | None) -> Decimal:
    # Postgres hands SUM() back as Decimal and COUNT() as int; both arrive here
    return (Decimal(cents or 0) / 100).quantize(_CENT, rounding=ROUND_HALF_UP)


def format_currency(cents: int | str | Decimal | None) -> str:
    """Format cents as en-US dollars: 150000 -> '$1,500.00', -5 -> '-$0.05'."""
    dollars = _to_dollars(cents)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"


def cents_to_dollars(cents: int | str | Decimal | None) -> float:
    """Convert cents to a dollar amount for edit forms: 150000 -> 1500.0."""
    return float(Decimal(cents or 0) / 100)
