"""
@file advisory.py
@brief Best-effort generative advisory for evacuation plans

@details
An AdvisoryAugmenter proposes a complete plan for a request. It is optional:
the evacuation service runs it under a timeout and treats every failure as
"unavailable", falling back to geo-only planning.

GeminiAdvisoryAugmenter gathers scored route options with the same selector
and scorer as the geo path, then asks Gemini to re-rank them for the user's
profile and to add short guidance. The model must answer with JSON:

@code{.json}
{"ranking": [2, 0, 1], "notes": ["...", "..."]}
@endcode

Indices refer to the options listed in the prompt. Options the model leaves
out keep their scored order after the ranked ones.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see services.evacuation for the timeout and fallback contract
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import google.generativeai as genai

from safeescape.core.exceptions import ProviderError
from safeescape.models.evacuation import (
    DisasterContext, EvacuationPlan, Location, PlanSource, RouteOption
)
from safeescape.services import guidance
from safeescape.services.route_scorer import RouteScorer
from safeescape.services.safe_zones import SafeZoneSelector

logger = logging.getLogger(__name__)

MAX_ADVISORY_NOTES = 5


class AdvisoryAugmenter(ABC):

    @abstractmethod
    async def suggest_plan(
        self,
        location: Location,
        disaster_context: DisasterContext,
        user_profile: Mapping[str, Any]
    ) -> EvacuationPlan:
        """Return a plan or raise; any exception means the advisory is unavailable."""
        ...


def build_prompt(
    location: Location,
    disaster_context: DisasterContext,
    user_profile: Mapping[str, Any],
    options: Sequence[RouteOption]
) -> str:
    listed = "\n".join(
        f"{i}. {o.candidate.name} ({o.candidate.category}) - "
        f"{o.distance_meters / 1000:.1f} km, {o.duration_seconds / 60:.0f} min {o.mode.value}, "
        f"{o.step_count} steps, score {o.composite_score:.0f}/100"
        + (f", warnings: {'; '.join(o.warnings)}" if o.warnings else "")
        + (f", hazards on route: {', '.join(o.hazards)}" if o.hazards else "")
        for i, o in enumerate(options)
    )
    severity = disaster_context.severity.value if disaster_context.severity else "unknown"
    profile = json.dumps(dict(user_profile), default=str) if user_profile else "{}"

    return f"""You are an emergency evacuation planner. Rank the candidate safe zones for this person.

Disaster: {disaster_context.disaster_type.value} (severity: {severity})
Current location: {location.latitude:.5f}, {location.longitude:.5f}
User profile: {profile}

Candidate routes:
{listed}

Consider the disaster type, the user's mobility and medical needs, travel time and route hazards.

Return ONLY valid JSON - no markdown, no code fences:
{{"ranking": [indices of the candidates above, best first], "notes": ["up to {MAX_ADVISORY_NOTES} short, actionable guidance sentences"]}}"""


def parse_advisory_response(
    text: str,
    options: Sequence[RouteOption]
) -> Tuple[List[RouteOption], List[str]]:
    """
    @brief Apply the model's ranking to the scored options

    @return (re-ranked options, guidance notes)
    @throws ProviderError on unparsable JSON or an unusable ranking
    """
    text = (text or "").strip()
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end == -1:
        raise ProviderError("Advisory response contains no JSON object")
    try:
        payload = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise ProviderError(f"Advisory response is not valid JSON: {e}")

    ranking = payload.get("ranking") if isinstance(payload, dict) else None
    if not isinstance(ranking, list) or not ranking:
        raise ProviderError("Advisory response has no ranking")

    ordered: List[RouteOption] = []
    used = set()
    for index in ranking:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(options):
            raise ProviderError(f"Advisory ranking refers to unknown option {index!r}")
        if index in used:
            continue
        used.add(index)
        ordered.append(options[index])
    ordered.extend(o for i, o in enumerate(options) if i not in used)

    notes = payload.get("notes") or []
    if not isinstance(notes, list):
        notes = [notes]
    notes = [str(n).strip() for n in notes if str(n).strip()][:MAX_ADVISORY_NOTES]
    return ordered, notes


class GeminiAdvisoryAugmenter(AdvisoryAugmenter):
    """
    @brief Gemini-backed advisory

    @param selector Safe-zone selector used to gather candidates
    @param scorer Route scorer used to score them before re-ranking
    @param api_key Gemini API key
    @param model_name Gemini model identifier
    @param max_candidates Candidates offered to the model
    """

    def __init__(
        self,
        selector: SafeZoneSelector,
        scorer: RouteScorer,
        api_key: str,
        model_name: str = "gemini-1.5-pro",
        max_candidates: int = 5,
        model: Optional[Any] = None
    ):
        self.selector = selector
        self.scorer = scorer
        self.max_candidates = max_candidates
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self.model = model

    async def suggest_plan(
        self,
        location: Location,
        disaster_context: DisasterContext,
        user_profile: Mapping[str, Any]
    ) -> EvacuationPlan:
        candidates = await self.selector.find_candidates(location, disaster_context, self.max_candidates)
        if not candidates:
            raise ProviderError("No candidates available for advisory ranking")
        options = await self.scorer.score_and_rank(location, candidates, disaster_context)

        prompt = build_prompt(location, disaster_context, user_profile, options)
        try:
            result = await self.model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=0.2,
                    top_p=0.8,
                    top_k=40,
                    max_output_tokens=1024,
                    response_mime_type="application/json",
                ),
            )
            text = result.text
        except Exception as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        ordered, notes = parse_advisory_response(text, options)
        primary = ordered[0]
        logger.info(f"Advisory ranked {primary.candidate.name} first among {len(ordered)} options")

        return EvacuationPlan(
            primary_route=primary,
            alternatives=tuple(ordered[1:3]),
            source=PlanSource.ADVISORY,
            notes=tuple(notes),
            safety_tips=guidance.safety_tips(disaster_context.disaster_type),
            instructions=guidance.arrival_instructions(primary.candidate),
        )


def plan_to_log(plan: EvacuationPlan) -> Dict[str, Any]:
    return {
        "source": plan.source.value,
        "primary": plan.primary_route.candidate.name,
        "alternatives": [o.candidate.name for o in plan.alternatives],
    }
