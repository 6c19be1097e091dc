"""
@file health.py
@brief System health checks and status monitoring

@details
Reports the status of the planner's collaborators:
- Geo provider (critical: no plan can be produced without it)
- Advisory service (optional: plans fall back to map-based routing)
- Redis cache (optional: lookups go straight to the provider)

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

import logging
from typing import Any, Dict

from safeescape.core.cache import cache

logger = logging.getLogger(__name__)


class HealthStatus:
    """Health status indicator for system components"""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


async def check_geo_provider(service) -> Dict[str, Any]:
    """
    @brief Check that a geo provider is configured
    """
    if service.geo_provider.configured:
        return {
            "status": HealthStatus.HEALTHY,
            "message": "Map provider is configured",
            "component": "geo_provider"
        }
    return {
        "status": HealthStatus.UNHEALTHY,
        "message": "Map provider API key is missing",
        "component": "geo_provider"
    }


async def check_advisory(service) -> Dict[str, Any]:
    if service.advisory is not None:
        return {
            "status": HealthStatus.HEALTHY,
            "message": "AI advisory is configured",
            "component": "advisory"
        }
    return {
        "status": HealthStatus.DEGRADED,
        "message": "AI advisory is not configured (map-based routing only)",
        "component": "advisory"
    }


async def check_cache() -> Dict[str, Any]:
    """
    @brief Check Redis cache connectivity
    @details Redis is optional - degraded status if unavailable.
    """
    try:
        if not cache.client:
            return {
                "status": HealthStatus.DEGRADED,
                "message": "Redis cache is not initialized",
                "component": "cache"
            }

        await cache.client.ping()
        return {
            "status": HealthStatus.HEALTHY,
            "message": "Redis cache is healthy",
            "component": "cache"
        }
    except Exception as e:
        logger.warning(f"Cache health check failed: {e}")
        return {
            "status": HealthStatus.DEGRADED,
            "message": "Redis cache is unavailable (running in degraded mode)",
            "component": "cache",
            "error": str(e)
        }


async def get_system_health(service) -> Dict[str, Any]:
    """
    @brief Get comprehensive system health status
    @details
    - HEALTHY: All components operational
    - DEGRADED: Map provider OK, advisory or cache unavailable
    - UNHEALTHY: Map provider unavailable
    """
    geo_status = await check_geo_provider(service)
    advisory_status = await check_advisory(service)
    cache_status = await check_cache()

    if geo_status["status"] == HealthStatus.UNHEALTHY:
        overall_status = HealthStatus.UNHEALTHY
    elif HealthStatus.DEGRADED in (advisory_status["status"], cache_status["status"]):
        overall_status = HealthStatus.DEGRADED
    else:
        overall_status = HealthStatus.HEALTHY

    return {
        "status": overall_status,
        "components": {
            "geo_provider": geo_status,
            "advisory": advisory_status,
            "cache": cache_status
        },
        "message": get_status_message(overall_status)
    }


def get_status_message(status: str) -> str:
    """Get human-readable status message"""
    messages = {
        HealthStatus.HEALTHY: "System is operational",
        HealthStatus.DEGRADED: "System is running with reduced functionality (non-critical services unavailable)",
        HealthStatus.UNHEALTHY: "System is in maintenance mode (critical services unavailable)"
    }
    return messages.get(status, "Unknown status")
