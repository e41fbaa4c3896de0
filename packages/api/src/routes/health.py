# This project was developed with assistance from AI tools.
"""Liveness and readiness checks."""

from db import DatabaseService, get_db_service
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..core.config import settings

router = APIRouter()


@router.get("/")
async def liveness() -> dict:
    """Process is up. Touches nothing external."""
    return {"success": True, "status": "ok", "app": settings.APP_NAME}


@router.get("/ready")
async def readiness(db: DatabaseService = Depends(get_db_service)) -> JSONResponse:
    """Database reachable."""
    healthy = await db.health_check()
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": healthy, "status": "ok" if healthy else "unavailable", "database": healthy},
    )
