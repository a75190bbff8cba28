"""Pagination — page count and offset arithmetic for the invoice table.

Invariants:
    - total_pages(count) == ceil(count / page_size); zero rows means zero pages
    - page_offset(page) == (page - 1) * page_size for page >= 1
"""

import math

ITEMS_PER_PAGE = 6


def total_pages(count: int, page_size: int = ITEMS_PER_PAGE) -> int:
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return math.ceil(count / page_size)


def page_offset(page: int, page_size: int = ITEMS_PER_PAGE) -> int:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    return (page - 1) * page_size
