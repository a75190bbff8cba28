"""Integration Tests: fetchers — shapes, search, pagination, formatting and failure mapping.

Invariants:
    - Each fetcher returns its read shape from the seeded store
    - Search is case-insensitive substring over name, email, amount, date, status
    - Store failures surface as StoreOperationError with the call site's fixed message
    - fetch_revenue is memoized per request scope only
    - fetch_invoices_pages_with_cache re-queries only after the "i-p" tag is revalidated
"""

import asyncio
from datetime import date

import pytest

from invoice_dashboard.core.domain_types import InvoiceStatus
from invoice_dashboard.core.errors import StoreOperationError
from invoice_dashboard.core.search import matches_query
from invoice_dashboard.infrastructure.cache import data_cache, request_scope
from invoice_dashboard.models import Customer
from invoice_dashboard.services import data
from invoice_dashboard.services.dashboard import fetch_all_dashboard_data


# ==============================================================================
# Revenue
# ==============================================================================


async def test_fetch_revenue_returns_all_months(seeded):
    revenue = await data.fetch_revenue()

    assert len(revenue) == 12
    assert {r.month for r in revenue} >= {"Jan", "Dec"}
    assert next(r for r in revenue if r.month == "Dec").revenue == 4800


async def test_fetch_revenue_memoized_within_request_scope(seeded, count_queries):
    with request_scope():
        first, second = await asyncio.gather(data.fetch_revenue(), data.fetch_revenue())
        third = await data.fetch_revenue()

    assert len(count_queries["fetch_all"]) == 1
    assert first is second is third


async def test_fetch_revenue_not_memoized_outside_request_scope(seeded, count_queries):
    await data.fetch_revenue()
    await data.fetch_revenue()

    assert len(count_queries["fetch_all"]) == 2


# ==============================================================================
# Latest invoices & cards
# ==============================================================================


async def test_fetch_latest_invoices_newest_five_with_formatted_amounts(seeded):
    latest = await data.fetch_latest_invoices()

    assert len(latest) == 5
    assert [i.name for i in latest] == [
        "Steven Tey", "Lee Robinson", "Michael Novotny",
        "Hector Simpson", "Delba de Oliveira",
    ]
    assert [i.amount for i in latest] == [
        "$448.00", "$5.00", "$345.77", "$542.46", "$6.66",
    ]
    assert latest[0].email == "steven@tey.com"
    assert latest[0].image_url == "/customers/steven-tey.png"


async def test_fetch_card_data_counts_and_totals(seeded):
    cards = await data.fetch_card_data()

    assert cards.number_of_invoices == 13
    assert cards.number_of_customers == 6
    assert cards.total_paid_invoices == "$1,006.26"
    assert cards.total_pending_invoices == "$1,256.32"


async def test_fetch_card_data_on_empty_store(store):
    cards = await data.fetch_card_data()

    assert cards.number_of_invoices == 0
    assert cards.number_of_customers == 0
    assert cards.total_paid_invoices == "$0.00"
    assert cards.total_pending_invoices == "$0.00"


async def test_fetch_card_data_issues_three_queries(seeded, count_queries):
    await data.fetch_card_data()

    assert len(count_queries["fetch_scalar"]) == 2
    assert len(count_queries["fetch_all"]) == 1


# ==============================================================================
# Invoice table
# ==============================================================================


async def test_filtered_invoices_uppercase_query_matches_status(seeded):
    rows = await data.fetch_filtered_invoices("PAID", 1)

    assert len(rows) == 6
    assert all(r.status == InvoiceStatus.PAID for r in rows)


async def test_filtered_invoices_second_page(seeded):
    rows = await data.fetch_filtered_invoices("paid", 2)

    assert len(rows) == 2
    assert all(r.status == InvoiceStatus.PAID for r in rows)


async def test_filtered_invoices_page_past_end_is_empty(seeded):
    assert await data.fetch_filtered_invoices("paid", 5) == []


async def test_filtered_invoices_newest_first_with_raw_cents(seeded):
    rows = await data.fetch_filtered_invoices("", 1)

    assert len(rows) == 6
    dates = [r.date for r in rows]
    assert dates == sorted(dates, reverse=True)
    assert rows[0].amount == 44800
    assert rows[0].name == "Steven Tey"


@pytest.mark.parametrize("query, expected", [
    ("steven", 2),          # customer name
    ("@robinson", 2),       # customer email
    ("2022", 4),            # invoice date as text
    ("54246", 1),           # amount as text
    ("pending", 5),         # status
    ("nobody-matches", 0),
])
async def test_filtered_invoices_searches_every_column(seeded, query, expected):
    rows = await data.fetch_filtered_invoices(query, 1)

    assert len(rows) == expected
    for r in rows:
        assert matches_query(query, r.name, r.email, r.amount, r.date, r.status)


async def test_fetch_invoices_pages(seeded):
    assert await data.fetch_invoices_pages("") == 3
    assert await data.fetch_invoices_pages("paid") == 2
    assert await data.fetch_invoices_pages("pending") == 1
    assert await data.fetch_invoices_pages("nobody-matches") == 0


async def test_invoice_pages_boundary_at_six_and_seven(store, add_invoice):
    for n in range(6):
        await add_invoice(f"inv-{n}", 100 + n)
    assert await data.fetch_invoices_pages("") == 1

    await add_invoice("inv-6", 200)
    assert await data.fetch_invoices_pages("") == 2


# ==============================================================================
# Tag-cached page count
# ==============================================================================


async def test_cached_pages_hit_until_revalidated(seeded, add_invoice, count_queries):
    assert await data.fetch_invoices_pages_with_cache("pending") == 1
    assert await data.fetch_invoices_pages_with_cache("pending") == 1
    assert len(count_queries["fetch_scalar"]) == 1

    # New rows stay invisible to the cached count until revalidation
    for n in range(2):
        await add_invoice(f"late-{n}", 700 + n, status="pending")
    assert await data.fetch_invoices_pages_with_cache("pending") == 1
    assert len(count_queries["fetch_scalar"]) == 1

    data_cache.revalidate_tag("i-p")

    assert await data.fetch_invoices_pages_with_cache("pending") == 2
    assert len(count_queries["fetch_scalar"]) == 2


async def test_cached_pages_keyed_by_query(seeded, count_queries):
    await data.fetch_invoices_pages_with_cache("paid")
    await data.fetch_invoices_pages_with_cache("pending")

    assert len(count_queries["fetch_scalar"]) == 2


async def test_cached_pages_concurrent_misses_query_once(seeded, count_queries):
    results = await asyncio.gather(
        *(data.fetch_invoices_pages_with_cache("paid") for _ in range(4)),
    )

    assert results == [2, 2, 2, 2]
    assert len(count_queries["fetch_scalar"]) == 1


# ==============================================================================
# Invoice form & customers
# ==============================================================================


async def test_fetch_invoice_by_id_converts_cents_to_dollars(store, add_invoice):
    await add_invoice("abc123", 150000, status="paid")

    invoice = await data.fetch_invoice_by_id("abc123")

    assert invoice.id == "abc123"
    assert invoice.amount == 1500
    assert invoice.customer_id == "cust-ada"
    assert invoice.status == InvoiceStatus.PAID


async def test_fetch_invoice_by_id_missing_returns_none(seeded):
    assert await data.fetch_invoice_by_id("does-not-exist") is None


async def test_fetch_customers_sorted_by_name(seeded):
    customers = await data.fetch_customers()

    names = [c.name for c in customers]
    assert names == sorted(names)
    assert len(customers) == 6
    assert customers[0].id == "3958dc9e-712f-4377-85e9-fec4b6a6442a"


async def test_fetch_filtered_customers_aggregates(seeded):
    rows = await data.fetch_filtered_customers("")

    assert [r.name for r in rows] == [
        "Delba de Oliveira", "Hector Simpson", "Lee Robinson",
        "Michael Novotny", "Steph Dietz", "Steven Tey",
    ]
    steven = rows[-1]
    assert steven.total_invoices == 2
    assert steven.total_paid == "$773.45"
    assert steven.total_pending == "$0.00"
    delba = rows[0]
    assert delba.total_pending == "$164.61"
    assert delba.total_paid == "$0.00"


async def test_fetch_filtered_customers_case_insensitive_email_match(seeded):
    rows = await data.fetch_filtered_customers("ROBINSON")

    assert [r.name for r in rows] == ["Lee Robinson"]
    assert rows[0].total_invoices == 2
    assert rows[0].total_paid == "$5.00"
    assert rows[0].total_pending == "$203.48"


async def test_fetch_filtered_customers_includes_customers_without_invoices(
    seeded, test_db,
):
    test_db.add(Customer(
        id="cust-new", name="Zed Newcomer",
        email="zed@example.com", image_url="/customers/zed.png",
    ))
    await test_db.commit()

    rows = await data.fetch_filtered_customers("zed")

    assert len(rows) == 1
    assert rows[0].total_invoices == 0
    assert rows[0].total_paid == "$0.00"
    assert rows[0].total_pending == "$0.00"


# ==============================================================================
# Failure mapping
# ==============================================================================


@pytest.mark.parametrize("call, message", [
    (lambda: data.fetch_revenue(), "Failed to fetch revenue data."),
    (lambda: data.fetch_latest_invoices(), "Failed to fetch the latest invoices."),
    (lambda: data.fetch_card_data(), "Failed to fetch card data."),
    (lambda: data.fetch_filtered_invoices("", 1), "Failed to fetch invoices."),
    (lambda: data.fetch_invoices_pages(""), "Failed to fetch total number of invoices."),
    (lambda: data.fetch_invoices_pages_with_cache(""), "Failed to fetch total number of invoices."),
    (lambda: data.fetch_invoice_by_id("abc123"), "Failed to fetch invoice."),
    (lambda: data.fetch_customers(), "Failed to fetch all customers."),
    (lambda: data.fetch_filtered_customers(""), "Failed to fetch customer table."),
])
async def test_store_failure_maps_to_fixed_message(broken_store, call, message):
    with pytest.raises(StoreOperationError) as exc_info:
        await call()

    assert exc_info.value.message == message
    assert "10.0.0.5" not in exc_info.value.to_response()["error"]["message"]


async def test_store_failure_is_logged(broken_store, caplog):
    with pytest.raises(StoreOperationError):
        await data.fetch_customers()

    record = next(r for r in caplog.records if r.getMessage().startswith("Database Error"))
    assert record.fetcher == "fetch_customers"
    assert "10.0.0.5" in record.getMessage()


async def test_driver_error_outside_sqlalchemy_maps_to_fixed_message(unreachable_store, caplog):
    with pytest.raises(StoreOperationError) as exc_info:
        await data.fetch_customers()

    assert exc_info.value.message == "Failed to fetch all customers."
    assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)
    record = next(r for r in caplog.records if r.getMessage().startswith("Database Error"))
    assert record.fetcher == "fetch_customers"


async def test_fan_out_keeps_its_own_message_on_driver_error(unreachable_store):
    with pytest.raises(StoreOperationError) as exc_info:
        await fetch_all_dashboard_data()

    assert exc_info.value.message == "Failed to fetch all dashboard data."


async def test_unexpected_status_is_passed_through(store, add_invoice):
    await add_invoice("inv-x", 100, status="overdue")

    rows = await data.fetch_filtered_invoices("", 1)
    invoice = await data.fetch_invoice_by_id("inv-x")

    assert [r.status for r in rows] == ["overdue"]
    assert invoice.status == "overdue"



async def test_failed_cached_fetch_is_retried_on_next_call(store, monkeypatch):
    original = store.fetch_scalar

    async def _fail(statement):
        raise RuntimeError("unreachable")

    monkeypatch.setattr(store, "fetch_scalar", _fail)
    with pytest.raises(StoreOperationError):
        await data.fetch_invoices_pages_with_cache("")

    monkeypatch.setattr(store, "fetch_scalar", original)
    assert await data.fetch_invoices_pages_with_cache("") == 0


async def test_dates_round_trip_as_dates(seeded):
    rows = await data.fetch_filtered_invoices("2022-12", 1)

    assert [r.date for r in rows] == [date(2022, 12, 6)]
