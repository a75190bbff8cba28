"""Search Predicates — case-insensitive substring matching for table filters.

Invariants:
    - An empty query matches everything
    - Matching is case-insensitive substring, never prefix or token based
    - search_pattern() and matches_query() agree for any row the store returns

Design Decisions:
    - The query is not LIKE-escaped: '%' and '_' in user input act as wildcards,
      matching the store-side ILIKE behavior
"""


def search_pattern(query: str | None) -> str:
    """ILIKE pattern for a free-text query: 'paid' -> '%paid%'."""
    return f"%{query or ''}%"


def matches_query(query: str | None, *values: object) -> bool:
    """In-memory twin of the ILIKE filter over the given column values."""
    needle = (query or "").lower()
    return any(
        needle in ("" if v is None else str(v)).lower() for v in values
    )
