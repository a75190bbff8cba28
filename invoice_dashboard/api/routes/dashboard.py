"""Dashboard Routes — revenue chart, latest invoices, summary cards and the merged payload.

Invariants:
    - GET /dashboard fans out and fails as a whole (no partial payload)
    - GET /dashboard/sequential returns the same shape, fetched one dataset at a time
"""

import logging

from fastapi import APIRouter

from invoice_dashboard.schemas.dashboard import CardData, DashboardData, Revenue
from invoice_dashboard.schemas.invoice import LatestInvoice
from invoice_dashboard.services import data
from invoice_dashboard.services.dashboard import (
    fetch_all_dashboard_data, fetch_dashboard_data_sequential,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardData)
async def get_dashboard():
    return await fetch_all_dashboard_data()


@router.get("/sequential", response_model=DashboardData)
async def get_dashboard_sequential():
    return await fetch_dashboard_data_sequential()


@router.get("/revenue", response_model=list[Revenue])
async def get_revenue():
    return await data.fetch_revenue()


@router.get("/latest-invoices", response_model=list[LatestInvoice])
async def get_latest_invoices():
    return await data.fetch_latest_invoices()


@router.get("/cards", response_model=CardData)
async def get_card_data():
    return await data.fetch_card_data()
