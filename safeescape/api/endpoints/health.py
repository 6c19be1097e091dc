"""
@file health.py
@brief Health check API endpoints
@details
Provides endpoints for monitoring system status, readiness, and liveness.
A missing map provider puts the API in maintenance mode; a missing advisory
or cache only degrades it.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from safeescape.api.dependencies import get_evacuation_service
from safeescape.core.health import HealthStatus, get_system_health
from safeescape.services.evacuation import EvacuationService

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(service: EvacuationService = Depends(get_evacuation_service)):
    """
    @brief Get system health status
    @details Returns 503 only when the map provider is unavailable.
    """
    health = await get_system_health(service)

    if health["status"] == HealthStatus.UNHEALTHY:
        return JSONResponse(
            status_code=503,
            content={
                "status": health["status"],
                "message": health["message"],
                "components": health["components"],
                "note": "System is in maintenance mode. Critical services are unavailable."
            }
        )

    content = {
        "status": health["status"],
        "message": health["message"],
        "components": health["components"]
    }
    if health["status"] == HealthStatus.DEGRADED:
        content["note"] = "Evacuation plans use map-based routing only."
    return content


@router.get("/health/ready")
async def readiness_check(service: EvacuationService = Depends(get_evacuation_service)):
    """
    @brief Kubernetes readiness probe
    @details Ready whenever plans can be produced, even without the advisory.
    """
    health = await get_system_health(service)

    if health["status"] != HealthStatus.UNHEALTHY:
        return {"ready": True, "status": "System is ready"}
    return JSONResponse(
        status_code=503,
        content={
            "ready": False,
            "status": "System is not ready",
            "reason": health["message"]
        }
    )


@router.get("/health/live")
async def liveness_check():
    """
    @brief Kubernetes liveness probe
    """
    return {"alive": True, "status": "Application is running"}
