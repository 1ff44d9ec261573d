"""Health check endpoint.

Returns service status including database connectivity.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from skillswap.db.supabase import ping

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return 200 when Supabase answers a trivial query, 503 otherwise."""
    db_status = "disconnected"
    try:
        if ping():
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
    }
    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)
    return payload
