"""Customer Routes — picker options and the aggregated customer table."""

import logging

from fastapi import APIRouter, Query

from invoice_dashboard.schemas.customer import CustomerField, CustomersTableRow
from invoice_dashboard.services import data

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


@router.get("", response_model=list[CustomerField])
async def list_customers():
    return await data.fetch_customers()


@router.get("/table", response_model=list[CustomersTableRow])
async def list_customers_table(query: str = Query("", max_length=200)):
    return await data.fetch_filtered_customers(query)
