"""
@file evacuation.py
@brief Evacuation planning service with advisory-first, geo-fallback strategy

@details
Public entry point of the planner, used by the HTTP layer:
- plan_evacuation: full plan (primary route plus up to 2 alternatives)
- find_safe_zones: ranked safe zones without routing, for map display

**Planning strategy (one pass per request):**
1. Advisory: ask the AdvisoryAugmenter for a plan under advisory_timeout_s.
   Success returns a plan with source=advisory.
2. Geo fallback: on advisory timeout, error or absence, select safe zones,
   score routes to them and assemble a plan with source=geo-fallback and a
   note describing the degraded mode.
3. If the geo path finds no candidate or no routable candidate, raise
   NoSafeZoneError carrying the underlying cause.

The fallback path only ever sees a DegradedReason, never the advisory's
exception.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see services.safe_zones for candidate selection
@see services.route_scorer for composite route scoring
@see services.advisory for the advisory contract
"""

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from safeescape.core.cache import RedisCache
from safeescape.core.config import Settings
from safeescape.core.exceptions import NoSafeZoneError, ProviderError, ValidationError
from safeescape.models.evacuation import (
    Candidate, DisasterContext, EvacuationPlan, Location, PlanSource
)
from safeescape.services import guidance
from safeescape.services.advisory import AdvisoryAugmenter, GeminiAdvisoryAugmenter, plan_to_log
from safeescape.services.geo_provider import GeoProvider, GoogleMapsGeoProvider
from safeescape.services.route_scorer import RouteScorer
from safeescape.services.safe_zones import DEFAULT_MAX_RESULTS, SafeZoneSelector

logger = logging.getLogger(__name__)


class DegradedReason(str, Enum):
    NONE = "none"
    TIMEOUT = "timeout"
    ERROR = "error"
    UNAVAILABLE = "unavailable"
    SKIPPED = "skipped"


## @brief Note placed first on geo-fallback plans, by degradation reason
DEGRADED_NOTES = {
    DegradedReason.TIMEOUT: "Route calculated using map service (AI optimization timed out)",
    DegradedReason.ERROR: "Route calculated using map service (AI optimization unavailable)",
    DegradedReason.UNAVAILABLE: "Route calculated using map service (AI optimization not configured)",
    DegradedReason.SKIPPED: "Route calculated using map service (AI optimization not requested)",
}


@dataclass(frozen=True)
class AdvisoryOutcome:
    plan: Optional[EvacuationPlan] = None
    degraded_reason: DegradedReason = DegradedReason.NONE

    @property
    def degraded(self) -> bool:
        return self.plan is None


class EvacuationService:
    """
    @brief Coordinates safe-zone selection, route scoring and the advisory path

    @param geo_provider Places/directions collaborator
    @param advisory Optional advisory augmenter
    @param advisory_timeout_s Time allowed for the advisory before fallback
    @param geo_timeout_s Time allowed for each geo provider call
    @param max_results Candidates routed on the geo path
    """

    def __init__(
        self,
        geo_provider: GeoProvider,
        advisory: Optional[AdvisoryAugmenter] = None,
        advisory_timeout_s: float = 5.0,
        geo_timeout_s: Optional[float] = 5.0,
        max_results: int = DEFAULT_MAX_RESULTS,
        selector: Optional[SafeZoneSelector] = None,
        scorer: Optional[RouteScorer] = None
    ):
        self.geo_provider = geo_provider
        self.advisory = advisory
        self.advisory_timeout_s = advisory_timeout_s
        self.max_results = max_results
        self.selector = selector or SafeZoneSelector(geo_provider, geo_timeout_s)
        self.scorer = scorer or RouteScorer(geo_provider, geo_timeout_s)

    @classmethod
    def from_settings(cls, settings: Settings, cache: Optional[RedisCache] = None) -> "EvacuationService":
        """
        @brief Build the production service: Google Maps plus Gemini when a key is set
        """
        geo_provider = GoogleMapsGeoProvider(
            api_key=settings.google_maps_api_key,
            timeout_s=settings.geo_timeout_s,
            cache=cache,
            cache_ttl_s=settings.places_cache_ttl_s,
        )
        selector = SafeZoneSelector(geo_provider, settings.geo_timeout_s)
        scorer = RouteScorer(geo_provider, settings.geo_timeout_s)

        advisory = None
        if settings.gemini_api_key:
            advisory = GeminiAdvisoryAugmenter(
                selector, scorer,
                api_key=settings.gemini_api_key,
                model_name=settings.gemini_model,
            )
        else:
            logger.warning("GEMINI_API_KEY not set - evacuation plans will use map-based routing only")

        return cls(
            geo_provider,
            advisory=advisory,
            advisory_timeout_s=settings.advisory_timeout_s,
            max_results=settings.max_safe_zones,
            selector=selector,
            scorer=scorer,
        )

    async def find_safe_zones(
        self,
        location: Location,
        disaster_context: DisasterContext,
        max_results: Optional[int] = None,
        categories: Optional[Sequence[str]] = None
    ) -> List[Candidate]:
        """
        @brief Ranked safe zones without route computation

        @param categories Place categories to search instead of the disaster defaults
        @throws ValidationError on invalid input
        @throws ProviderError if every nearby search failed
        """
        _validate(location, disaster_context)
        return await self.selector.find_candidates(
            location, disaster_context,
            self.max_results if max_results is None else max_results,
            categories,
        )

    async def plan_evacuation(
        self,
        location: Location,
        disaster_context: DisasterContext,
        user_profile: Optional[Mapping[str, Any]] = None,
        use_advisory: bool = True,
        categories: Optional[Sequence[str]] = None
    ) -> EvacuationPlan:
        """
        @brief Produce an evacuation plan, degrading to geo-only planning

        @param use_advisory False skips the advisory path entirely
        @param categories Place categories searched on the geo path, disaster defaults when None
        @return EvacuationPlan with source advisory or geo-fallback
        @throws ValidationError on invalid input, before any provider call
        @throws NoSafeZoneError when neither path can produce a plan
        """
        _validate(location, disaster_context)
        if user_profile is None:
            user_profile = {}
        elif not isinstance(user_profile, Mapping):
            raise ValidationError("userProfile must be an object")

        if use_advisory:
            outcome = await self._attempt_advisory(location, disaster_context, user_profile)
        else:
            outcome = AdvisoryOutcome(degraded_reason=DegradedReason.SKIPPED)

        if not outcome.degraded:
            return outcome.plan
        return await self._geo_plan(location, disaster_context, outcome.degraded_reason, categories)

    async def _attempt_advisory(
        self,
        location: Location,
        disaster_context: DisasterContext,
        user_profile: Mapping[str, Any]
    ) -> AdvisoryOutcome:
        if self.advisory is None:
            return AdvisoryOutcome(degraded_reason=DegradedReason.UNAVAILABLE)

        try:
            logger.info("Attempting AI-powered evacuation optimization")
            plan = await asyncio.wait_for(
                self.advisory.suggest_plan(location, disaster_context, user_profile),
                timeout=self.advisory_timeout_s,
            )
        except asyncio.TimeoutError:
            logger.warning(f"AI evacuation timed out after {self.advisory_timeout_s}s, falling back to map-based routing")
            return AdvisoryOutcome(degraded_reason=DegradedReason.TIMEOUT)
        except Exception as e:
            logger.warning(f"AI evacuation failed, falling back to map-based routing: {e}")
            return AdvisoryOutcome(degraded_reason=DegradedReason.ERROR)

        if not isinstance(plan, EvacuationPlan):
            logger.warning(f"AI evacuation returned {type(plan).__name__}, falling back to map-based routing")
            return AdvisoryOutcome(degraded_reason=DegradedReason.ERROR)

        plan = dataclasses.replace(plan, source=PlanSource.ADVISORY, degraded=False)
        logger.info(f"Advisory plan ready: {plan_to_log(plan)}")
        return AdvisoryOutcome(plan=plan)

    async def _geo_plan(
        self,
        location: Location,
        disaster_context: DisasterContext,
        reason: DegradedReason,
        categories: Optional[Sequence[str]] = None
    ) -> EvacuationPlan:
        disaster_type = disaster_context.disaster_type
        try:
            candidates = await self.selector.find_candidates(
                location, disaster_context, self.max_results, categories
            )
        except ProviderError as e:
            raise NoSafeZoneError("Safe-zone search failed", cause=e) from e
        if not candidates:
            raise NoSafeZoneError("No safe locations found")

        try:
            options = await self.scorer.score_and_rank(location, candidates, disaster_context)
        except ProviderError as e:
            raise NoSafeZoneError("No viable evacuation routes found", cause=e) from e

        primary = options[0]
        notes = (DEGRADED_NOTES[reason],) + guidance.evacuation_notes(primary.candidate.category, disaster_type)
        plan = EvacuationPlan(
            primary_route=primary,
            alternatives=tuple(options[1:3]),
            source=PlanSource.GEO_FALLBACK,
            notes=notes,
            safety_tips=guidance.safety_tips(disaster_type),
            instructions=guidance.arrival_instructions(primary.candidate),
            degraded=True,
        )
        logger.info(f"Geo plan ready ({reason.value}): {plan_to_log(plan)}")
        return plan


def _validate(location: Any, disaster_context: Any):
    if not isinstance(location, Location):
        raise ValidationError("Valid user location required")
    if not isinstance(disaster_context, DisasterContext):
        raise ValidationError("Valid disaster context required")
