"""Tests for search predicates — ILIKE pattern and its in-memory twin."""

from datetime import date

from invoice_dashboard.core.search import matches_query, search_pattern


def test_search_pattern_wraps_query_in_wildcards():
    assert search_pattern("paid") == "%paid%"


def test_search_pattern_for_empty_or_missing_query_matches_all():
    assert search_pattern("") == "%%"
    assert search_pattern(None) == "%%"


def test_uppercase_query_matches_lowercase_status():
    assert matches_query("PAID", "paid")


def test_substring_match_across_any_value():
    assert matches_query("robin", "Lee Robinson", "lee@robinson.com")
    assert matches_query("@tey", "Steven Tey", "steven@tey.com")


def test_amount_and_date_match_as_text():
    assert matches_query("157", 15795)
    assert matches_query("2022-12", date(2022, 12, 6))


def test_no_match():
    assert not matches_query("overdue", "Delba de Oliveira", "pending", 666)


def test_none_values_never_match_a_non_empty_query():
    assert not matches_query("x", None)


def test_empty_query_matches_any_row():
    assert matches_query("", "anything")
