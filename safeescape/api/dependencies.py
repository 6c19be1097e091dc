"""
@file dependencies.py
@brief FastAPI dependency providers

@author SafeEscape Project
@date 2025-12-18
@license AGPL-3.0
"""

from fastapi import HTTPException, Request

from safeescape.services.evacuation import EvacuationService


def get_evacuation_service(request: Request) -> EvacuationService:
    """
    @brief Evacuation service built during application startup

    @throws HTTPException(503) if startup has not completed
    """
    service = getattr(request.app.state, "evacuation_service", None)
    if service is None:
        raise HTTPException(
            status_code=503,
            detail="Evacuation service is not initialized. System is starting up."
        )
    return service
