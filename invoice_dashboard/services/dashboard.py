"""Dashboard Orchestration — fetch revenue, latest invoices and cards as one payload.

Invariants:
    - fetch_all_dashboard_data runs its three branches concurrently and returns
      only when all succeeded; any failing branch fails the whole call
    - fetch_dashboard_data_sequential awaits the public fetchers one by one
      (total latency is the sum of their delays) and surfaces each fetcher's own error

Design Decisions:
    - Fan-out branches query directly instead of calling the public fetchers so
      one error message covers the merged payload
    - Card figures come from a single statement in the fan-out path; the public
      fetch_card_data keeps its three concurrent queries
"""

import asyncio
import logging

from invoice_dashboard.infrastructure.database import get_db_manager
from invoice_dashboard.schemas.dashboard import CardData, DashboardData, Revenue
from invoice_dashboard.schemas.invoice import LatestInvoice
from invoice_dashboard.services.data import (
    card_totals_statement,
    fetch_card_data,
    fetch_latest_invoices,
    fetch_revenue,
    latest_invoices_statement,
    revenue_statement,
    simulate_latency,
    store_operation,
    to_card_data,
    to_latest_invoice,
)

logger = logging.getLogger(__name__)


async def _revenue_branch() -> list[Revenue]:
    await simulate_latency("revenue", 6)
    rows = await get_db_manager().fetch_all(revenue_statement())
    return [Revenue(month=r["month"], revenue=r["revenue"]) for r in rows]


async def _latest_invoices_branch() -> list[LatestInvoice]:
    await simulate_latency("latest invoices", 2)
    rows = await get_db_manager().fetch_all(latest_invoices_statement())
    return [to_latest_invoice(r) for r in rows]


async def _card_branch() -> CardData:
    await simulate_latency("card", 4)
    rows = await get_db_manager().fetch_all(card_totals_statement())
    row = rows[0]
    return to_card_data(
        row["invoice_count"], row["customer_count"], row["paid"], row["pending"],
    )


@store_operation("Failed to fetch all dashboard data.")
async def fetch_all_dashboard_data() -> DashboardData:
    """Fan out the three dashboard datasets and merge them."""
    revenue, latest_invoices, card_data = await asyncio.gather(
        _revenue_branch(), _latest_invoices_branch(), _card_branch(),
    )
    return DashboardData(
        revenue=revenue, latest_invoices=latest_invoices, card_data=card_data,
    )


async def fetch_dashboard_data_sequential() -> DashboardData:
    """Waterfall variant: each fetch starts after the previous one finished."""
    revenue = await fetch_revenue()
    latest_invoices = await fetch_latest_invoices()
    card_data = await fetch_card_data()
    logger.debug("Sequential dashboard fetch complete")
    return DashboardData(
        revenue=revenue, latest_invoices=latest_invoices, card_data=card_data,
    )
