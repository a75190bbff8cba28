"""Cache Revalidation — the external signal that drops tag-cached entries.

Invariants:
    - Revalidating an unknown tag is not an error; it clears nothing
    - The next read of a revalidated key re-executes its query
"""

import logging

from fastapi import APIRouter, Query

from invoice_dashboard.infrastructure.cache import data_cache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cache", tags=["cache"])


@router.post("/revalidate")
async def revalidate(tag: str = Query(min_length=1, max_length=64)):
    cleared = data_cache.revalidate_tag(tag)
    return {"tag": tag, "revalidated": True, "entries_cleared": cleared}
