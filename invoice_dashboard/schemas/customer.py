"""Customer Schemas — picker options and the aggregated customer table."""

from pydantic import BaseModel


class CustomerField(BaseModel):
    """Customer option for the invoice form's customer picker."""
    id: str
    name: str


class CustomersTableRow(BaseModel):
    """Customer with invoice count and formatted paid/pending totals."""
    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str
