"""
@file schemas.py
@brief Request bodies for the evacuation API

@details
Field names follow the mobile client's camelCase payloads. Range checks on
coordinates and disaster types are done by the domain model so they map to
HTTP 400 like every other planner validation error.

@author SafeEscape Project
@date 2025-12-18
@license AGPL-3.0
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class LatLng(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None


class DisasterData(BaseModel):
    type: Optional[str] = None
    severity: Optional[str] = None


class OptimizeRouteRequest(BaseModel):
    userLocation: Optional[LatLng] = None
    disasterData: Optional[DisasterData] = None
    userProfile: Optional[Dict[str, Any]] = None
