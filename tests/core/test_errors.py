"""Tests for the error hierarchy — codes, statuses and the REST envelope."""

from invoice_dashboard.core.errors import (
    DashboardError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    ResourceNotFoundError,
    StoreOperationError,
)


def test_store_operation_error_carries_fixed_message():
    err = StoreOperationError("Failed to fetch invoices.")
    assert isinstance(err, DashboardError)
    assert err.code == "STORE_OPERATION_FAILED"
    assert err.category == ErrorCategory.DATABASE
    assert err.http_status == 500
    assert str(err) == "Failed to fetch invoices."


def test_to_response_envelope():
    err = StoreOperationError(
        "Failed to fetch card data.", ErrorContext(fetcher="fetch_card_data"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "STORE_OPERATION_FAILED"
    assert body["message"] == "Failed to fetch card data."
    assert body["category"] == "database"
    assert body["context"] == {"fetcher": "fetch_card_data"}
    assert "timestamp" in body


def test_user_message_overrides_internal_message():
    err = DatabaseError(
        "connection refused", "execute",
        ErrorContext(user_message="The store is unavailable."),
    )
    assert err.message == "Database execute failed: connection refused"
    assert err.to_response()["error"]["message"] == "The store is unavailable."
    assert err.http_status == 503


def test_resource_not_found():
    err = ResourceNotFoundError("Invoice", "abc123")
    assert err.http_status == 404
    assert err.message == "Invoice 'abc123' not found"
