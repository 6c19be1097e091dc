"""
@file evacuation.py
@brief Value types for evacuation planning

@details
Immutable data model shared by the safe-zone selector, route scorer and
evacuation service:
- Location: validated WGS84 coordinate
- DisasterContext: disaster type and optional severity for one request
- Place / RawRoute: raw results returned by a geo provider
- Candidate: ranked safe-zone option
- RouteOption: scored route to one candidate
- EvacuationPlan: final recommendation returned to callers

All types are frozen dataclasses and expose to_dict() for JSON responses.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see models.disaster_rules for the per-disaster tables
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from safeescape.core.exceptions import ValidationError


class DisasterType(str, Enum):
    FLOOD = "flood"
    FIRE = "fire"
    EARTHQUAKE = "earthquake"
    TORNADO = "tornado"
    HURRICANE = "hurricane"
    TSUNAMI = "tsunami"
    GENERAL = "general"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class TravelMode(str, Enum):
    DRIVING = "driving"
    WALKING = "walking"


class PlanSource(str, Enum):
    ADVISORY = "advisory"
    GEO_FALLBACK = "geo-fallback"


def _parse_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Unknown {label} '{value}'. Expected one of: {allowed}")


@dataclass(frozen=True)
class Location:
    """
    @brief Geographic coordinate in decimal degrees
    @details Construction fails with ValidationError outside [-90,90] x [-180,180].
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        for name, value, bound in (("latitude", self.latitude, 90.0), ("longitude", self.longitude, 180.0)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{name} must be a number, got {value!r}")
            if math.isnan(value) or value < -bound or value > bound:
                raise ValidationError(f"{name} {value} outside [-{bound:g}, {bound:g}]")
            object.__setattr__(self, name, float(value))

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> "Location":
        """
        @brief Build a Location from raw request values (strings or numbers)
        """
        if latitude is None or longitude is None:
            raise ValidationError("Valid location coordinates required")
        try:
            return cls(float(latitude), float(longitude))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid coordinates: lat={latitude!r}, lng={longitude!r}")

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True)
class DisasterContext:
    disaster_type: DisasterType = DisasterType.GENERAL
    severity: Optional[Severity] = None

    @classmethod
    def parse(cls, disaster_type: Any = None, severity: Any = None) -> "DisasterContext":
        """
        @brief Build a DisasterContext from raw strings
        @details
        A missing disaster type means "general". Unknown values raise
        ValidationError before any provider call is made.
        """
        parsed_type = DisasterType.GENERAL
        if disaster_type not in (None, ""):
            parsed_type = _parse_enum(DisasterType, disaster_type, "disaster type")
        parsed_severity = None
        if severity not in (None, ""):
            parsed_severity = _parse_enum(Severity, severity, "severity")
        return cls(parsed_type, parsed_severity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.disaster_type.value,
            "severity": self.severity.value if self.severity else None,
        }


@dataclass(frozen=True)
class Place:
    """Raw point of interest returned by a geo provider nearby search."""
    name: str
    location: Location
    category: str
    address: str = ""
    place_id: Optional[str] = None


@dataclass(frozen=True)
class RawRoute:
    """Raw route returned by a geo provider directions request."""
    distance_meters: float
    duration_seconds: float
    step_count: int
    warnings: Tuple[str, ...] = ()
    step_instructions: Tuple[str, ...] = ()
    summary: str = ""


@dataclass(frozen=True)
class Candidate:
    name: str
    location: Location
    category: str
    distance_meters: float
    suitability_score: int
    address: str = ""
    place_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "location": self.location.to_dict(),
            "address": self.address,
            "placeId": self.place_id,
            "type": self.category,
            "distanceMeters": round(self.distance_meters, 1),
            "suitabilityScore": self.suitability_score,
        }


@dataclass(frozen=True)
class RouteOption:
    """
    @brief Scored route from the origin to one candidate
    @details composite_score is always clamped to [0, 100].
    """
    candidate: Candidate
    distance_meters: float
    duration_seconds: float
    step_count: int
    composite_score: float
    mode: TravelMode = TravelMode.DRIVING
    warnings: Tuple[str, ...] = ()
    hazards: Tuple[str, ...] = ()
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": self.candidate.to_dict(),
            "distanceMeters": self.distance_meters,
            "durationSeconds": self.duration_seconds,
            "stepCount": self.step_count,
            "mode": self.mode.value,
            "warnings": list(self.warnings),
            "hazards": list(self.hazards),
            "summary": self.summary,
            "compositeScore": round(self.composite_score, 2),
        }


@dataclass(frozen=True)
class EvacuationPlan:
    primary_route: RouteOption
    source: PlanSource
    alternatives: Tuple[RouteOption, ...] = ()
    notes: Tuple[str, ...] = ()
    safety_tips: Tuple[str, ...] = ()
    instructions: Tuple[str, ...] = ()
    degraded: bool = False

    def __post_init__(self):
        if len(self.alternatives) > 2:
            raise ValueError("An evacuation plan carries at most 2 alternatives")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primaryRoute": self.primary_route.to_dict(),
            "alternatives": [option.to_dict() for option in self.alternatives],
            "source": self.source.value,
            "degraded": self.degraded,
            "notes": list(self.notes),
            "safetyTips": list(self.safety_tips),
            "instructions": list(self.instructions),
        }
