"""Health check endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from ..core.config import settings
from ..core.database import Database, get_database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version
    }

@router.get("/db")
async def database_health(database: Database = Depends(get_database)):
    """Database health check"""
    healthy = await database.health_check()
    if not healthy:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": database.backend}
        )
    return {"status": "healthy", "database": database.backend}
