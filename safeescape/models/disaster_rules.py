"""
@file disaster_rules.py
@brief Per-disaster rule tables for safe-zone selection and route scoring

@details
Static, read-only lookup tables indexed by DisasterType:
- SAFE_ZONE_CATEGORIES: place categories to search, in priority order
- SEARCH_RADIUS_M: nearby-search radius in meters
- EXCLUDED_CATEGORIES: categories never offered as a safe zone
- SUITABILITY_BONUS: preference bonus added to the base suitability score
- DESTINATION_BONUS: composite score bonus by destination category
- HAZARD_KEYWORDS: route step keywords and their composite score penalty

Tables are wrapped in MappingProxyType so they cannot be changed at runtime.
Scoring magnitudes are grouped in ScoringWeights; they are heuristics and
can be tuned by passing a different instance to RouteScorer.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from safeescape.models.evacuation import DisasterType, TravelMode

## @brief Provider-supported nearby-search radius range (meters)
MIN_SEARCH_RADIUS_M = 1_000
MAX_SEARCH_RADIUS_M = 50_000
DEFAULT_SEARCH_RADIUS_M = 10_000

## @brief Base suitability score for every candidate
BASE_SUITABILITY = 3

_DEFAULT_CATEGORIES = ("hospital", "police", "fire_station", "school")

SAFE_ZONE_CATEGORIES: Mapping[DisasterType, Tuple[str, ...]] = MappingProxyType({
    # Elevated buildings
    DisasterType.FLOOD: ("school", "stadium", "government_office", "university"),
    # Equipped for emergencies
    DisasterType.FIRE: ("hospital", "police", "fire_station", "school"),
    # Open spaces
    DisasterType.EARTHQUAKE: ("park", "stadium", "school"),
    # Strong structures
    DisasterType.TORNADO: ("community_center", "school", "stadium"),
    DisasterType.HURRICANE: ("community_center", "school", "stadium"),
    DisasterType.TSUNAMI: ("school", "stadium", "government_office"),
    DisasterType.GENERAL: _DEFAULT_CATEGORIES,
})

SEARCH_RADIUS_M: Mapping[DisasterType, int] = MappingProxyType({
    DisasterType.FLOOD: 15_000,
    DisasterType.FIRE: 8_000,
    DisasterType.TORNADO: 20_000,
    DisasterType.HURRICANE: 20_000,
})

EXCLUDED_CATEGORIES: Mapping[DisasterType, frozenset] = MappingProxyType({
    DisasterType.FLOOD: frozenset({"subway_station", "basement", "underground_parking"}),
    DisasterType.FIRE: frozenset({"gas_station", "chemical_plant", "fuel_depot"}),
})

SUITABILITY_BONUS: Mapping[DisasterType, Mapping[str, int]] = MappingProxyType({
    DisasterType.FLOOD: MappingProxyType({"school": 2, "stadium": 2}),
    DisasterType.FIRE: MappingProxyType({"fire_station": 3, "hospital": 2}),
    DisasterType.EARTHQUAKE: MappingProxyType({"park": 3, "stadium": 2}),
})

DESTINATION_BONUS: Mapping[DisasterType, Mapping[str, float]] = MappingProxyType({
    DisasterType.FLOOD: MappingProxyType({"stadium": 15.0, "school": 10.0}),
    DisasterType.FIRE: MappingProxyType({"fire_station": 20.0, "hospital": 15.0}),
    DisasterType.EARTHQUAKE: MappingProxyType({"park": 15.0, "stadium": 10.0}),
})

## @brief (keywords, penalty) applied once when any step instruction matches
HAZARD_KEYWORDS: Mapping[DisasterType, Tuple[Tuple[str, ...], float]] = MappingProxyType({
    DisasterType.FLOOD: (("tunnel", "underpass"), 40.0),
    DisasterType.EARTHQUAKE: (("bridge",), 30.0),
})


@dataclass(frozen=True)
class ScoringWeights:
    """
    @brief Composite route score parameters
    @details
    Score starts at `start` and loses one point per minute, per kilometer and
    per step up to the respective caps, plus a flat penalty per provider warning.
    """
    start: float = 100.0
    duration_cap: float = 40.0
    distance_cap: float = 30.0
    complexity_cap: float = 15.0
    warning_penalty: float = 10.0


DEFAULT_WEIGHTS = ScoringWeights()


def safe_zone_categories(disaster_type: DisasterType) -> Tuple[str, ...]:
    return SAFE_ZONE_CATEGORIES.get(disaster_type, _DEFAULT_CATEGORIES)


def search_radius(disaster_type: DisasterType) -> int:
    """
    @brief Search radius for a disaster type, clamped to the provider range
    """
    radius = SEARCH_RADIUS_M.get(disaster_type, DEFAULT_SEARCH_RADIUS_M)
    return min(MAX_SEARCH_RADIUS_M, max(MIN_SEARCH_RADIUS_M, radius))


def is_excluded(disaster_type: DisasterType, category: str) -> bool:
    return category in EXCLUDED_CATEGORIES.get(disaster_type, frozenset())


def suitability_score(disaster_type: DisasterType, category: str) -> int:
    return BASE_SUITABILITY + SUITABILITY_BONUS.get(disaster_type, {}).get(category, 0)


def destination_bonus(disaster_type: DisasterType, category: str) -> float:
    return DESTINATION_BONUS.get(disaster_type, {}).get(category, 0.0)


def travel_mode(disaster_type: DisasterType) -> TravelMode:
    # Driving through flood water is unsafe
    if disaster_type == DisasterType.FLOOD:
        return TravelMode.WALKING
    return TravelMode.DRIVING
