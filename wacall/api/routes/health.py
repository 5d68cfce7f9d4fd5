"""
Health check endpoint.
"""

import time
from typing import Any

from fastapi import APIRouter, Request

from wacall.core.config.settings import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """
    Basic health check endpoint.

    Returns application status, environment information and the wired
    collaborators.
    """
    controller = getattr(request.app.state, "webhook_controller", None)
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": {
            "environment": settings.environment,
            "version": settings.version,
            "log_level": settings.log_level,
        },
        "webhook": controller.get_health_status() if controller else None,
    }
