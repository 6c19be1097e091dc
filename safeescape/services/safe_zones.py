"""
@file safe_zones.py
@brief Disaster-aware safe-zone selection

@details
Finds shelter candidates around a location for one disaster type:

1. Pick place categories and search radius from the disaster rule tables
2. Query the geo provider once per category, concurrently, each call under
   its own timeout; a failed category counts as zero results
3. Merge results, dropping places already returned under an earlier category
4. Drop categories excluded for the disaster type (hard exclusion)
5. Score suitability (base 3 plus per-disaster category bonus) and compute
   haversine distance from the origin
6. Sort by (suitability desc, distance asc) and keep the first max_results

An empty result is returned when every category succeeded with no places.
ProviderError is raised only when every category query failed.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see models.disaster_rules for the category, radius and bonus tables
"""

import logging
from typing import List, Optional, Sequence, Set, Tuple

from safeescape.core.concurrency import gather_isolated
from safeescape.core.exceptions import ProviderError, ValidationError
from safeescape.models import disaster_rules as rules
from safeescape.models.evacuation import Candidate, DisasterContext, Location, Place
from safeescape.services.geo_provider import GeoProvider, haversine_distance_m

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 3


def _dedupe_key(place: Place) -> Tuple:
    if place.place_id:
        return ("id", place.place_id)
    return ("name", place.name.strip().lower(),
            round(place.location.latitude, 4), round(place.location.longitude, 4))


class SafeZoneSelector:
    """
    @brief Chooses and ranks safe-zone candidates for a disaster

    @param geo_provider Places search collaborator
    @param timeout_s Per-category query timeout in seconds
    """

    def __init__(self, geo_provider: GeoProvider, timeout_s: Optional[float] = 5.0):
        self.geo_provider = geo_provider
        self.timeout_s = timeout_s

    async def find_candidates(
        self,
        location: Location,
        disaster_context: DisasterContext,
        max_results: int = DEFAULT_MAX_RESULTS,
        categories: Optional[Sequence[str]] = None
    ) -> List[Candidate]:
        """
        @brief Search, filter and rank safe zones around a location

        @param location Origin of the evacuation
        @param disaster_context Disaster type driving the rule tables
        @param max_results Number of candidates to keep (>= 1)
        @param categories Override of the per-disaster category list
        @return Candidates sorted best first, possibly empty

        @throws ValidationError if max_results < 1
        @throws ProviderError if every category query failed
        """
        if max_results < 1:
            raise ValidationError(f"max_results must be at least 1, got {max_results}")

        disaster_type = disaster_context.disaster_type
        categories = tuple(categories) if categories else rules.safe_zone_categories(disaster_type)
        radius = rules.search_radius(disaster_type)
        logger.info(
            f"Finding safe zones near {location.latitude},{location.longitude} "
            f"for {disaster_type.value}: categories={list(categories)} radius={radius}m"
        )

        outcomes = await gather_isolated(
            [f"nearby search '{category}'" for category in categories],
            [self.geo_provider.find_nearby(location, radius, category) for category in categories],
            timeout=self.timeout_s,
        )

        failures = [o for o in outcomes if not o.ok]
        if failures and len(failures) == len(outcomes):
            raise ProviderError(
                f"All {len(outcomes)} nearby searches failed; last error: {failures[-1].error}"
            )

        seen: Set[Tuple] = set()
        candidates: List[Candidate] = []
        for outcome in outcomes:
            if not outcome.ok:
                continue
            for place in outcome.value or []:
                key = _dedupe_key(place)
                if key in seen:
                    continue
                seen.add(key)
                if rules.is_excluded(disaster_type, place.category):
                    logger.debug(f"Excluding {place.name} ({place.category}) for {disaster_type.value}")
                    continue
                candidates.append(Candidate(
                    name=place.name,
                    location=place.location,
                    category=place.category,
                    distance_meters=haversine_distance_m(location, place.location),
                    suitability_score=rules.suitability_score(disaster_type, place.category),
                    address=place.address,
                    place_id=place.place_id,
                ))

        candidates.sort(key=lambda c: (-c.suitability_score, c.distance_meters))
        logger.info(f"Total safe locations found: {len(candidates)} (keeping {min(max_results, len(candidates))})")
        return candidates[:max_results]
