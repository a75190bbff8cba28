"""Dashboard Schemas — revenue chart rows, summary cards and the merged payload.

Invariants:
    - CardData money fields are formatted strings; counts are plain ints
    - DashboardData is all-or-nothing: it only exists when every dataset loaded
"""

from pydantic import BaseModel

from invoice_dashboard.schemas.invoice import LatestInvoice


class Revenue(BaseModel):
    month: str
    revenue: float


class CardData(BaseModel):
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str


class DashboardData(BaseModel):
    """Merged payload of the three dashboard datasets."""
    revenue: list[Revenue]
    latest_invoices: list[LatestInvoice]
    card_data: CardData
