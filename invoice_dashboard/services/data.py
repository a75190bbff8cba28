"""Data Access — one fetcher per dashboard dataset, built on the query executor.

Invariants:
    - Every fetcher either returns its fully mapped result or raises
      StoreOperationError with its fixed message; nothing partial escapes
    - Store error detail is logged, never placed in the raised message
    - Amounts leave this module formatted (cards, latest invoices, customer table),
      in dollars (invoice form), or in raw cents (invoice table), per read shape
    - Artificial delays are demo-only and scaled by settings.demo_latency_scale

Design Decisions:
    - Statements built with SQLAlchemy Core so bound parameters are always used
      and the same code runs on PostgreSQL and SQLite
    - Card totals issue three independent queries concurrently (asyncio.gather);
      they could be one statement, see card_totals_statement() for that form
    - The executor is looked up per call (get_db_manager) so fetchers keep the
      argument lists renderers call them with
"""

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy import String, case, cast, func, or_, select
from sqlalchemy.engine import RowMapping
from sqlalchemy.sql.expression import ColumnElement, Select

from invoice_dashboard.config import get_settings
from invoice_dashboard.core.domain_types import CacheTag, InvoiceStatus
from invoice_dashboard.core.errors import ErrorContext, StoreOperationError
from invoice_dashboard.core.formatting import cents_to_dollars, format_currency
from invoice_dashboard.core.pagination import page_offset, total_pages
from invoice_dashboard.core.search import search_pattern
from invoice_dashboard.infrastructure.cache import data_cache, request_memo
from invoice_dashboard.infrastructure.database import get_db_manager
from invoice_dashboard.models.customer import Customer
from invoice_dashboard.models.invoice import Invoice
from invoice_dashboard.models.revenue import Revenue as RevenueModel
from invoice_dashboard.schemas.customer import CustomerField, CustomersTableRow
from invoice_dashboard.schemas.dashboard import CardData, Revenue
from invoice_dashboard.schemas.invoice import (
    InvoiceForm, InvoicesTableRow, LatestInvoice,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

LATEST_INVOICES_LIMIT = 5


# ─── Plumbing ───────────────────────────────────────────────────

def store_operation(
    message: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Log store failures and re-raise them as StoreOperationError(message)."""

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await fn(*args, **kwargs)
            except StoreOperationError:
                raise
            except Exception as e:
                logger.error(
                    f"Database Error: {e}",
                    extra={"fetcher": fn.__name__, "error_code": "STORE_OPERATION_FAILED"},
                )
                raise StoreOperationError(
                    message, ErrorContext(fetcher=fn.__name__),
                ) from e
        return wrapper

    return decorator


async def simulate_latency(label: str, seconds: float) -> None:
    """Artificially delay a response for demo purposes. Never do this in production."""
    scaled = seconds * get_settings().demo_latency_scale
    logger.info(f"Fetching {label} data...", extra={"delay_seconds": scaled})
    if scaled > 0:
        await asyncio.sleep(scaled)
    logger.info(f"{label} completed after {seconds:g} seconds.")


def _status_total(status: InvoiceStatus) -> ColumnElement:
    return func.sum(
        case((Invoice.status == status.value, Invoice.amount), else_=0),
    )


def _invoice_search(query: str) -> ColumnElement[bool]:
    pattern = search_pattern(query)
    return or_(
        Customer.name.ilike(pattern),
        Customer.email.ilike(pattern),
        cast(Invoice.amount, String).ilike(pattern),
        cast(Invoice.date, String).ilike(pattern),
        Invoice.status.ilike(pattern),
    )


# ─── Statements ─────────────────────────────────────────────────

def revenue_statement() -> Select:
    return select(RevenueModel.month, RevenueModel.revenue)


def latest_invoices_statement() -> Select:
    return (
        select(
            Invoice.amount, Customer.name, Customer.image_url,
            Customer.email, Invoice.id,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .order_by(Invoice.date.desc())
        .limit(LATEST_INVOICES_LIMIT)
    )


def card_totals_statement() -> Select:
    """All four card figures in one row: invoice_count, customer_count, paid, pending."""
    return select(
        select(func.count()).select_from(Invoice)
        .scalar_subquery().label("invoice_count"),
        select(func.count()).select_from(Customer)
        .scalar_subquery().label("customer_count"),
        select(_status_total(InvoiceStatus.PAID))
        .scalar_subquery().label("paid"),
        select(_status_total(InvoiceStatus.PENDING))
        .scalar_subquery().label("pending"),
    )


# ─── Row mapping ────────────────────────────────────────────────

def to_latest_invoice(row: RowMapping) -> LatestInvoice:
    return LatestInvoice(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        image_url=row["image_url"],
        amount=format_currency(row["amount"]),
    )


def to_card_data(
    invoice_count: int | None, customer_count: int | None,
    paid: int | None, pending: int | None,
) -> CardData:
    return CardData(
        number_of_invoices=int(invoice_count or 0),
        number_of_customers=int(customer_count or 0),
        total_paid_invoices=format_currency(paid),
        total_pending_invoices=format_currency(pending),
    )


# ─── Fetchers ───────────────────────────────────────────────────

@request_memo
@store_operation("Failed to fetch revenue data.")
async def fetch_revenue() -> list[Revenue]:
    """Monthly revenue rows. Memoized per request: repeated calls in one render share a query."""
    await simulate_latency("Revenue", 6)
    rows = await get_db_manager().fetch_all(revenue_statement())
    return [Revenue(month=r["month"], revenue=r["revenue"]) for r in rows]


@store_operation("Failed to fetch the latest invoices.")
async def fetch_latest_invoices() -> list[LatestInvoice]:
    rows = await get_db_manager().fetch_all(latest_invoices_statement())
    latest = [to_latest_invoice(r) for r in rows]
    await simulate_latency("Latest Invoices", 2)
    return latest


@store_operation("Failed to fetch card data.")
async def fetch_card_data() -> CardData:
    """Summary card figures from three queries issued concurrently."""
    db = get_db_manager()
    invoice_count, customer_count, totals = await asyncio.gather(
        db.fetch_scalar(select(func.count()).select_from(Invoice)),
        db.fetch_scalar(select(func.count()).select_from(Customer)),
        db.fetch_all(select(
            _status_total(InvoiceStatus.PAID).label("paid"),
            _status_total(InvoiceStatus.PENDING).label("pending"),
        )),
    )
    await simulate_latency("Card", 4)
    return to_card_data(
        invoice_count, customer_count, totals[0]["paid"], totals[0]["pending"],
    )


@store_operation("Failed to fetch invoices.")
async def fetch_filtered_invoices(
    query: str, current_page: int,
) -> list[InvoicesTableRow]:
    """One page of invoices matching query, newest first. Amounts stay in cents."""
    page_size = get_settings().items_per_page
    statement = (
        select(
            Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.date,
            Invoice.status, Customer.name, Customer.email, Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_invoice_search(query))
        .order_by(Invoice.date.desc(), Invoice.id)
        .limit(page_size)
        .offset(page_offset(current_page, page_size))
    )
    rows = await get_db_manager().fetch_all(statement)
    return [InvoicesTableRow(**r) for r in rows]


@store_operation("Failed to fetch total number of invoices.")
async def fetch_invoices_pages(query: str) -> int:
    """Number of invoice-table pages for query."""
    statement = (
        select(func.count())
        .select_from(Invoice)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_invoice_search(query))
    )
    count = await get_db_manager().fetch_scalar(statement)
    await simulate_latency("total pages", 3)
    return total_pages(int(count or 0), get_settings().items_per_page)


# Same fetch, cached across requests until the "i-p" tag is revalidated
fetch_invoices_pages_with_cache = data_cache.cached(
    ["invoice-pages"], tags=[CacheTag.INVOICE_PAGES.value],
)(fetch_invoices_pages)


@store_operation("Failed to fetch invoice.")
async def fetch_invoice_by_id(invoice_id: str) -> InvoiceForm | None:
    """Invoice form record with amount converted from cents to dollars."""
    statement = select(
        Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status,
    ).where(Invoice.id == invoice_id)
    rows = await get_db_manager().fetch_all(statement)
    if not rows:
        return None
    row = rows[0]
    return InvoiceForm(
        id=row["id"],
        customer_id=row["customer_id"],
        amount=cents_to_dollars(row["amount"]),
        status=row["status"],
    )


@store_operation("Failed to fetch all customers.")
async def fetch_customers() -> list[CustomerField]:
    statement = select(Customer.id, Customer.name).order_by(Customer.name.asc())
    rows = await get_db_manager().fetch_all(statement)
    return [CustomerField(**r) for r in rows]


@store_operation("Failed to fetch customer table.")
async def fetch_filtered_customers(query: str) -> list[CustomersTableRow]:
    """Customers matching query by name or email, with invoice count and totals."""
    pattern = search_pattern(query)
    statement = (
        select(
            Customer.id, Customer.name, Customer.email, Customer.image_url,
            func.count(Invoice.id).label("total_invoices"),
            _status_total(InvoiceStatus.PENDING).label("total_pending"),
            _status_total(InvoiceStatus.PAID).label("total_paid"),
        )
        .outerjoin(Invoice, Customer.id == Invoice.customer_id)
        .where(or_(Customer.name.ilike(pattern), Customer.email.ilike(pattern)))
        .group_by(
            Customer.id, Customer.name, Customer.email, Customer.image_url,
        )
        .order_by(Customer.name.asc())
    )
    rows = await get_db_manager().fetch_all(statement)
    return [
        CustomersTableRow(
            id=r["id"],
            name=r["name"],
            email=r["email"],
            image_url=r["image_url"],
            total_invoices=r["total_invoices"],
            total_pending=format_currency(r["total_pending"]),
            total_paid=format_currency(r["total_paid"]),
        )
        for r in rows
    ]
