# bitacora/app/api/v1/endpoints/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    settings = request.app.state.settings
    return {
        "success": True,
        "message": f"{settings.PROJECT_NAME} API is running",
        "environment": settings.ENVIRONMENT,
        "database": "connected" if request.app.state.database.is_connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
