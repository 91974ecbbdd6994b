"""
Health check endpoint with database status and record counts
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from api.dependencies import get_db
from core.exceptions import StoreError
from schemas.api import HealthCheckResponse
from store.sqlalchemy_store import SQLAlchemyRecordStore
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])

COUNTED_COLLECTIONS = (
    "companies",
    "teams",
    "users",
    "checklists",
    "llm_prompts",
    "processing_logs",
)


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Record counts for the main collections
    """
    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    record_counts = {}
    if db_connected:
        store = SQLAlchemyRecordStore(db)
        try:
            for collection in COUNTED_COLLECTIONS:
                record_counts[collection] = await store.count(collection)
        except StoreError as e:
            logger.error(f"Failed to count records: {e.message}")

    return HealthCheckResponse(
        status="healthy" if db_connected else "unhealthy",
        timestamp=datetime.utcnow(),
        database_connected=db_connected,
        record_counts=record_counts
    )
