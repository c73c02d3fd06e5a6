"""
Health check endpoints.

Provides endpoints for monitoring application health and status.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.routes.discover import get_session_manager
from config.settings import get_settings
from services.session_manager import DiscoverSessionManager


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    sessions: DiscoverSessionManager = Depends(get_session_manager),
) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Reports "degraded" when the catalog is empty, since sessions would
    never receive candidates.
    """
    stats = sessions.get_stats()
    return {
        "status": "healthy" if stats["catalog_items"] else "degraded",
        "service": "discover-api",
        "environment": get_settings().environment,
        "checks": stats,
    }


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes-style liveness probe.

    Returns 200 if the service is alive.
    """
    return {"status": "alive"}
