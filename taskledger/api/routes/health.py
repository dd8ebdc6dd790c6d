"""
TaskLedger — Health API
"""

import logging
import sqlite3

from fastapi import APIRouter, Depends

from ...database import Database, get_database
from ..response_models import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(db: Database = Depends(get_database)):
    """Liveness plus a database round-trip. No authentication."""
    try:
        db.fetch_value("SELECT 1")
    except sqlite3.Error as e:
        logger.error(f"Health check database error: {e}")
        return HealthResponse(status="degraded", database="error")
    return HealthResponse(status="ok", database="ok")
