"""
Operations routes: liveness, readiness and request metrics.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..obs.obs import get_metrics
from ..schemas import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ops"])


@router.get("/healthz")
def healthz():
    """Liveness: the process is up"""
    return ApiResponse.ok({"status": "ok"})


@router.get("/readyz")
def readyz(db: Session = Depends(get_db)):
    """Readiness: the database answers"""
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"success": False, "error": {"code": "NOT_READY", "message": "Database unavailable"}},
        )
    return ApiResponse.ok({"status": "ready"})


@router.get("/metrics")
def metrics():
    """Per-route request counts and latencies (ADMIN)"""
    if not settings.metrics_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return ApiResponse.ok(get_metrics())
