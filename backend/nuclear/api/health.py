"""
Health API: GET /api/health (no auth). Liveness plus a database round-trip.
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from nuclear.config import settings
from nuclear.database import check_database, get_db

router = APIRouter(prefix="/api", tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health")
def health(db: Session = Depends(get_db)):
    """200 with status/database/responseTime when the database answers; 500 with diagnostics otherwise."""
    started = time.perf_counter()
    body = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.env,
    }
    try:
        check_database(db)
    except Exception as e:
        logger.error("Health check: database unreachable: %s", e)
        body.update(
            status="unhealthy",
            database="disconnected",
            responseTime=f"{int((time.perf_counter() - started) * 1000)}ms",
            error=f"Database connection failed: {e}" if settings.debug else f"Database connection failed ({type(e).__name__})",
        )
        return JSONResponse(status_code=500, content=body)
    body.update(database="connected", responseTime=f"{int((time.perf_counter() - started) * 1000)}ms")
    return body
