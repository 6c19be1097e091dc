"""
@file route_scorer.py
@brief Composite safety/efficiency scoring of evacuation routes

@details
Routes every candidate concurrently and scores the first route returned for
each one. Travel mode is walking for floods and driving otherwise.

**Composite score** (clamped to [0, 100]):
@code
score = 100
      - min(40, duration_s / 60)        # one point per minute
      - min(30, distance_m / 1000)      # one point per kilometer
      - min(15, step_count)             # navigation complexity
      - 10 * len(warnings)              # provider warnings, uncapped
      - hazard penalty                  # flood: tunnel/underpass -40, earthquake: bridge -30
      + destination bonus               # e.g. fire -> fire_station +20
@endcode

Candidates whose routing fails are dropped. Results are sorted by score
descending, then by shorter duration; remaining ties keep candidate order.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see models.disaster_rules for weights, bonuses and hazard keywords
"""

import logging
from typing import List, Optional, Sequence, Tuple

from safeescape.core.concurrency import gather_isolated
from safeescape.core.exceptions import ProviderError
from safeescape.models import disaster_rules as rules
from safeescape.models.evacuation import (
    Candidate, DisasterContext, DisasterType, Location, RawRoute, RouteOption, TravelMode
)
from safeescape.services.geo_provider import GeoProvider

logger = logging.getLogger(__name__)


def detect_hazards(route: RawRoute, disaster_type: DisasterType) -> Tuple[Tuple[str, ...], float]:
    """
    @brief Find hazard keywords in step instructions
    @return (matched keywords, penalty); penalty applies once per route
    """
    rule = rules.HAZARD_KEYWORDS.get(disaster_type)
    if rule is None:
        return (), 0.0
    keywords, penalty = rule
    text = " ".join(route.step_instructions).lower()
    matched = tuple(k for k in keywords if k in text)
    return matched, (penalty if matched else 0.0)


def composite_score(
    route: RawRoute,
    candidate: Candidate,
    disaster_type: DisasterType,
    weights: rules.ScoringWeights = rules.DEFAULT_WEIGHTS
) -> Tuple[float, Tuple[str, ...]]:
    """
    @brief Score one route to one candidate
    @return (score in [0, 100], detected hazard keywords)
    """
    score = weights.start
    score -= min(weights.duration_cap, route.duration_seconds / 60.0)
    score -= min(weights.distance_cap, route.distance_meters / 1000.0)
    score -= min(weights.complexity_cap, float(route.step_count))
    score -= weights.warning_penalty * len(route.warnings)

    hazards, penalty = detect_hazards(route, disaster_type)
    score -= penalty
    score += rules.destination_bonus(disaster_type, candidate.category)

    return max(0.0, min(100.0, score)), hazards


class RouteScorer:
    """
    @brief Routes and ranks candidates for one origin

    @param geo_provider Routing collaborator
    @param timeout_s Per-candidate routing timeout in seconds
    @param weights Scoring parameters
    """

    def __init__(
        self,
        geo_provider: GeoProvider,
        timeout_s: Optional[float] = 5.0,
        weights: rules.ScoringWeights = rules.DEFAULT_WEIGHTS
    ):
        self.geo_provider = geo_provider
        self.timeout_s = timeout_s
        self.weights = weights

    def build_option(
        self,
        candidate: Candidate,
        route: RawRoute,
        disaster_type: DisasterType,
        mode: TravelMode
    ) -> RouteOption:
        score, hazards = composite_score(route, candidate, disaster_type, self.weights)
        return RouteOption(
            candidate=candidate,
            distance_meters=route.distance_meters,
            duration_seconds=route.duration_seconds,
            step_count=route.step_count,
            composite_score=score,
            mode=mode,
            warnings=tuple(route.warnings),
            hazards=hazards,
            summary=route.summary,
        )

    async def score_and_rank(
        self,
        origin: Location,
        candidates: Sequence[Candidate],
        disaster_context: DisasterContext
    ) -> List[RouteOption]:
        """
        @brief Route every candidate and return scored options, best first

        @throws ProviderError if no candidate could be routed
        """
        if not candidates:
            raise ProviderError("No candidates to route")

        disaster_type = disaster_context.disaster_type
        mode = rules.travel_mode(disaster_type)

        outcomes = await gather_isolated(
            [f"route to '{c.name}'" for c in candidates],
            [self.geo_provider.route(origin, c.location, mode) for c in candidates],
            timeout=self.timeout_s,
        )

        options: List[RouteOption] = []
        last_error: Optional[BaseException] = None
        for candidate, outcome in zip(candidates, outcomes):
            if not outcome.ok:
                last_error = outcome.error
                continue
            if not outcome.value:
                last_error = ProviderError(f"Provider returned no route to '{candidate.name}'")
                logger.warning(str(last_error))
                continue
            options.append(self.build_option(candidate, outcome.value[0], disaster_type, mode))

        if not options:
            raise ProviderError(
                f"Routing failed for all {len(candidates)} candidates; last error: {last_error}"
            )

        # sort is stable: equal score and duration keep candidate order
        options.sort(key=lambda o: (-o.composite_score, o.duration_seconds))
        logger.info(
            f"Scored {len(options)}/{len(candidates)} routes ({mode.value}); "
            f"best: {options[0].candidate.name} = {options[0].composite_score:.1f}"
        )
        return options
