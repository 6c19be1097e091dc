"""
@file routes.py
@brief FastAPI endpoint definitions for evacuation planning

@details
Provides RESTful endpoints for:
- AI-assisted evacuation planning with map-based fallback
- Map-based evacuation planning without the advisory step
- Safe-location listing for map display
- Supported disaster type catalogue

Planner errors propagate to the handlers registered in main:
ValidationError -> 400, NoSafeZoneError -> 404, ProviderError -> 503.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see services.evacuation for the planning strategy
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from safeescape.api.dependencies import get_evacuation_service
from safeescape.api.schemas import OptimizeRouteRequest
from safeescape.core.exceptions import ValidationError
from safeescape.models import disaster_rules as rules
from safeescape.models.evacuation import DisasterContext, DisasterType, Location
from safeescape.services.evacuation import EvacuationService

## @brief FastAPI router instance for evacuation endpoints
router = APIRouter(prefix="/evacuation", tags=["Evacuation"])

logger = logging.getLogger(__name__)


def _place_types(value: Optional[str]) -> Optional[List[str]]:
    """Comma-separated place categories from a query string, None when absent."""
    if not value:
        return None
    types = [t.strip().lower() for t in value.split(",") if t.strip()]
    return types or None


@router.post("/optimize")
async def optimize_route(
    body: OptimizeRouteRequest,
    service: EvacuationService = Depends(get_evacuation_service)
):
    """
    @brief Smart evacuation route optimization with fallback

    @details
    Tries the AI advisory first and falls back to map-based routing when it
    fails or times out. The response `source` tells which path produced the plan.

    **Body:**
    - userLocation: {lat, lng} (required)
    - disasterData: {type, severity} (optional, type defaults to general)
    - userProfile: free-form object passed to the advisory

    @return {"success": true, "data": plan, "source": "advisory"|"geo-fallback"}
    """
    if body.userLocation is None:
        raise ValidationError("Valid user location required")
    location = Location.parse(body.userLocation.lat, body.userLocation.lng)
    disaster = body.disasterData
    context = DisasterContext.parse(
        disaster.type if disaster else None,
        disaster.severity if disaster else None,
    )
    logger.info(f"Optimize request: {context.disaster_type.value} at {location.latitude},{location.longitude}")

    plan = await service.plan_evacuation(location, context, body.userProfile or {})
    return {"success": True, "data": plan.to_dict(), "source": plan.source.value}


@router.get("/basic-route")
async def basic_route(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    disasterType: Optional[str] = None,
    severity: Optional[str] = None,
    type: Optional[str] = None,
    service: EvacuationService = Depends(get_evacuation_service)
):
    """
    @brief Map-based evacuation route without AI optimization
    @details For simpler, faster routes where advisory ranking isn't needed.

    `type` restricts the search to the given place categories (comma-separated).
    """
    location = Location.parse(lat, lng)
    context = DisasterContext.parse(disasterType, severity)

    plan = await service.plan_evacuation(
        location, context, use_advisory=False, categories=_place_types(type)
    )
    return {"success": True, "data": plan.to_dict(), "source": plan.source.value}


@router.get("/safe-locations")
async def safe_locations(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    disasterType: Optional[str] = None,
    maxResults: int = Query(default=10, ge=1, le=50),
    type: Optional[str] = None,
    service: EvacuationService = Depends(get_evacuation_service)
):
    """
    @brief Nearby safe locations without calculating routes
    @details For displaying safe locations on a map. An empty list is a valid answer.

    `type` restricts the search to the given place categories (comma-separated).
    """
    location = Location.parse(lat, lng)
    context = DisasterContext.parse(disasterType)

    candidates = await service.find_safe_zones(location, context, maxResults, _place_types(type))
    return {
        "success": True,
        "data": [c.to_dict() for c in candidates],
        "count": len(candidates),
    }


@router.get("/disaster-types")
def disaster_types():
    """
    @brief Supported disaster types with their search rules
    """
    return {
        "success": True,
        "data": [
            {
                "type": t.value,
                "categories": list(rules.safe_zone_categories(t)),
                "searchRadiusMeters": rules.search_radius(t),
                "excludedCategories": sorted(rules.EXCLUDED_CATEGORIES.get(t, frozenset())),
                "travelMode": rules.travel_mode(t).value,
            }
            for t in DisasterType
        ],
    }
