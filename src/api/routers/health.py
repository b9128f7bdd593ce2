"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_file_area
from storage.file_area import LocalFileArea

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    storage: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    file_area: LocalFileArea = Depends(get_file_area),
) -> HealthResponse:
    """Check database connectivity and that the storage root is usable."""
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        db_status = "unhealthy"

    # A missing root is fine: folders are created on demand
    root = file_area.root
    storage_status = "unhealthy" if root.exists() and not root.is_dir() else "healthy"

    return HealthResponse(
        status="healthy" if db_status == storage_status == "healthy" else "degraded",
        database=db_status,
        storage=storage_status,
    )
