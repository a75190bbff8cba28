"""Invoice Routes — searchable paginated table and the edit-form record.

Invariants:
    - page is validated >= 1 before any fetcher runs
    - The table's page count comes from the tag-cached fetcher; /pages is uncached
    - A missing invoice is a 404 ResourceNotFoundError, not an empty body
"""

import asyncio
import logging

from fastapi import APIRouter, Query

from invoice_dashboard.core.errors import ResourceNotFoundError
from invoice_dashboard.schemas.invoice import InvoiceForm, InvoicesPage
from invoice_dashboard.services import data

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


@router.get("", response_model=InvoicesPage)
async def list_invoices(
    query: str = Query("", max_length=200),
    page: int = Query(1, ge=1),
):
    """One table page plus the total page count, fetched concurrently."""
    invoices, total_pages = await asyncio.gather(
        data.fetch_filtered_invoices(query, page),
        data.fetch_invoices_pages_with_cache(query),
    )
    return InvoicesPage(
        query=query, current_page=page,
        total_pages=total_pages, invoices=invoices,
    )


@router.get("/pages")
async def get_invoice_pages(query: str = Query("", max_length=200)):
    return {"query": query, "total_pages": await data.fetch_invoices_pages(query)}


@router.get("/{invoice_id}", response_model=InvoiceForm)
async def get_invoice(invoice_id: str):
    invoice = await data.fetch_invoice_by_id(invoice_id)
    if invoice is None:
        raise ResourceNotFoundError("Invoice", invoice_id)
    return invoice
