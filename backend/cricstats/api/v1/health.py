"""Health check endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cricstats.api.deps import get_db_session
from cricstats.core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/healthz")
def health_check(db: Session = Depends(get_db_session)):
    """Health check endpoint."""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        logger.warning("health_check_database_unavailable", exc_info=True)
        database = "disconnected"
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
    }


@router.get("/version")
async def version():
    """Version endpoint."""
    return {
        "version": "0.1.0",
        "api_version": "v1",
    }
