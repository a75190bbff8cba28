"""Health Probes — liveness plus a readiness check of the dashboard's data path.

Invariants:
    - GET /health/ answers 200 while the process is up and reports the demo
      latency scale, so a slow dashboard can be told apart from a slow store
    - GET /health/ready is 503 until the store answers; the tag cache never
      affects readiness, it is only reported
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from invoice_dashboard.config import get_settings
from invoice_dashboard.infrastructure import database
from invoice_dashboard.infrastructure.cache import data_cache

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "invoice-dashboard-api",
        "demo_latency_scale": get_settings().demo_latency_scale,
    }


@router.get("/ready")
async def readiness_check():
    """Ready once the store answers. Also reports how warm the invoice-pages cache is."""
    manager = database.db_manager
    store_ok = manager is not None and await manager.health_check()
    cache = {"entries": len(data_cache), "loaded": len(data_cache) > 0}
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
                "cache": cache,
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}, "cache": cache}
