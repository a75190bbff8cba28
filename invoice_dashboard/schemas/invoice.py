"""Invoice Schemas — shapes for the latest-invoice card, table and edit form.

Invariants:
    - LatestInvoice.amount is already formatted ('$1,500.00')
    - InvoicesTableRow.amount stays in raw cents (the renderer formats it)
    - InvoiceForm.amount is in dollars (cents / 100) for editing
    - status is passed through as stored; the column is a plain string and only
      the store constrains it
"""

import datetime

from pydantic import BaseModel, Field


class LatestInvoice(BaseModel):
    """One of the five most recent invoices, joined with its customer."""
    id: str
    name: str
    email: str
    image_url: str
    amount: str


class InvoicesTableRow(BaseModel):
    """A row of the searchable invoice table."""
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: datetime.date
    amount: int
    status: str


class InvoiceForm(BaseModel):
    """Invoice fields needed by the edit form."""
    id: str
    customer_id: str
    amount: float
    status: str


class InvoicesPage(BaseModel):
    """One page of the invoice table plus the page count for the paginator."""
    query: str
    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    invoices: list[InvoicesTableRow]
