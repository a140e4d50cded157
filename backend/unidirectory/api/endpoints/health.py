"""
Health check endpoint for load balancers and uptime probes
"""
from fastapi import APIRouter, Depends

from unidirectory.core.config import settings
from unidirectory.core.database import Database, get_database

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(database: Database = Depends(get_database)):
    """Report liveness and database connectivity"""
    db_ok = await database.ping()
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "ok" if db_ok else "unavailable",
        "app_name": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }
