import logging

from fastapi import APIRouter
from sqlalchemy import text

from app.database import engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database is reachable."
)
def readiness_check():
    """Readiness check: runs a trivial query against the database."""
    checks = {"database": False}

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.error(f"Database readiness check failed: {e}")
        checks["database_error"] = "unreachable"

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
