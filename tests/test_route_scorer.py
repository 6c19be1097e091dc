"""
Route Scorer Tests

Exact composite scores for the documented formula, hazard penalties,
destination bonuses, clamping, ordering and per-candidate failure isolation.

Author: SafeEscape Project
License: AGPL-3.0
"""

import pytest

from safeescape.core.exceptions import ProviderError
from safeescape.models.disaster_rules import ScoringWeights
from safeescape.models.evacuation import Candidate, DisasterContext, DisasterType, TravelMode
from safeescape.services.route_scorer import RouteScorer, composite_score
from safeescape.services.safe_zones import SafeZoneSelector
from tests.fakes import MUMBAI, FakeGeoProvider, make_place, make_route


def _candidate(category="school", name=None, lat=19.09, lng=72.88):
    place = make_place(name or f"{category} {lat}", category, lat, lng)
    return Candidate(
        name=place.name,
        location=place.location,
        category=category,
        distance_meters=1000.0,
        suitability_score=3,
    )


class TestCompositeScore:
    """Single-route scoring against the documented formula."""

    def test_duration_distance_and_steps(self):
        score, hazards = composite_score(make_route(2000, 600, steps=4), _candidate("police"), DisasterType.GENERAL)
        assert score == pytest.approx(100 - 10 - 2 - 4)
        assert hazards == ()

    def test_penalties_are_capped(self):
        route = make_route(100_000, 3 * 3600, steps=80)
        score, _ = composite_score(route, _candidate("police"), DisasterType.GENERAL)
        assert score == pytest.approx(100 - 40 - 30 - 15)

    def test_each_warning_costs_ten_points(self):
        route = make_route(1000, 60, steps=1, warnings=["Ferry required", "Toll road"])
        score, _ = composite_score(route, _candidate("police"), DisasterType.GENERAL)
        assert score == pytest.approx(100 - 1 - 1 - 1 - 20)

    def test_flood_tunnel_penalty(self):
        route = make_route(1000, 60, steps=1, instructions=["Continue through the Eastern Freeway TUNNEL"])
        score, hazards = composite_score(route, _candidate("government_office"), DisasterType.FLOOD)
        assert hazards == ("tunnel",)
        assert score == pytest.approx(100 - 3 - 40)

    def test_flood_penalty_applies_once(self):
        route = make_route(1000, 60, steps=2, instructions=["Take the underpass", "Enter tunnel"])
        score, hazards = composite_score(route, _candidate("government_office"), DisasterType.FLOOD)
        assert set(hazards) == {"tunnel", "underpass"}
        assert score == pytest.approx(100 - 1 - 1 - 2 - 40)

    def test_earthquake_bridge_penalty(self):
        route = make_route(1000, 60, steps=1, instructions=["Cross Bandra-Worli Sea Link bridge"])
        score, hazards = composite_score(route, _candidate("school"), DisasterType.EARTHQUAKE)
        assert hazards == ("bridge",)
        assert score == pytest.approx(100 - 3 - 30)

    def test_bridge_ignored_for_floods(self):
        route = make_route(1000, 60, steps=1, instructions=["Cross the bridge"])
        score, hazards = composite_score(route, _candidate("government_office"), DisasterType.FLOOD)
        assert hazards == ()
        assert score == pytest.approx(97)

    @pytest.mark.parametrize("disaster_type,category,bonus", [
        (DisasterType.FLOOD, "stadium", 15),
        (DisasterType.FLOOD, "school", 10),
        (DisasterType.FIRE, "fire_station", 20),
        (DisasterType.FIRE, "hospital", 15),
        (DisasterType.EARTHQUAKE, "park", 15),
        (DisasterType.EARTHQUAKE, "stadium", 10),
        (DisasterType.TORNADO, "stadium", 0),
    ])
    def test_destination_bonus(self, disaster_type, category, bonus):
        route = make_route(10_000, 1200, steps=10)
        score, _ = composite_score(route, _candidate(category), disaster_type)
        assert score == pytest.approx(100 - 20 - 10 - 10 + bonus)

    def test_score_clamped_to_range(self):
        high, _ = composite_score(make_route(0, 0, steps=0), _candidate("fire_station"), DisasterType.FIRE)
        low, _ = composite_score(
            make_route(90_000, 9000, steps=30, warnings=["a", "b", "c", "d"]),
            _candidate("school"), DisasterType.GENERAL,
        )
        assert high == 100.0
        assert low == 0.0

    def test_custom_weights(self):
        weights = ScoringWeights(duration_cap=5.0)
        score, _ = composite_score(make_route(0, 3600, steps=0), _candidate("police"), DisasterType.GENERAL, weights)
        assert score == pytest.approx(95)


class TestScoreAndRank:

    @pytest.mark.asyncio
    async def test_mumbai_flood_scenario(self, flood_provider):
        """Closer school beats the stadium despite the stadium's larger bonus."""
        context = DisasterContext(DisasterType.FLOOD)
        candidates = await SafeZoneSelector(flood_provider).find_candidates(MUMBAI, context)

        options = await RouteScorer(flood_provider).score_and_rank(MUMBAI, candidates, context)

        assert [o.candidate.category for o in options] == ["school", "stadium"]
        # school: 100 - 10 min - 2 km - 4 steps + 10
        assert options[0].composite_score == pytest.approx(94)
        # stadium: 100 - 25 min - 5 km - 6 steps + 15
        assert options[1].composite_score == pytest.approx(79)

    @pytest.mark.asyncio
    async def test_flood_routes_on_foot(self, flood_provider, school):
        context = DisasterContext(DisasterType.FLOOD)
        options = await RouteScorer(flood_provider).score_and_rank(MUMBAI, [_candidate("school", lat=19.094, lng=72.8777)], context)

        assert {mode for _, mode in flood_provider.route_calls} == {TravelMode.WALKING}
        assert options[0].mode == TravelMode.WALKING

    @pytest.mark.asyncio
    async def test_other_disasters_drive(self, fire_provider):
        context = DisasterContext(DisasterType.FIRE)
        candidates = await SafeZoneSelector(fire_provider).find_candidates(MUMBAI, context)

        await RouteScorer(fire_provider).score_and_rank(MUMBAI, candidates, context)

        assert {mode for _, mode in fire_provider.route_calls} == {TravelMode.DRIVING}

    @pytest.mark.asyncio
    async def test_uses_first_route_of_alternatives(self):
        target = _candidate("police")
        provider = FakeGeoProvider(routes={
            target.location: [make_route(1000, 60, steps=1), make_route(100, 10, steps=1)]
        })

        options = await RouteScorer(provider).score_and_rank(MUMBAI, [target], DisasterContext())

        assert options[0].distance_meters == 1000

    @pytest.mark.asyncio
    async def test_scores_non_increasing_and_in_range(self):
        candidates = [_candidate("police", lat=19.08 + i * 0.01) for i in range(6)]
        provider = FakeGeoProvider(routes={
            c.location: [make_route(1000 * (i + 1) * 7, 300 * (6 - i) * 3, steps=i * 4, warnings=["w"] * (i % 3))]
            for i, c in enumerate(candidates)
        })

        options = await RouteScorer(provider).score_and_rank(MUMBAI, candidates, DisasterContext())
        scores = [o.composite_score for o in options]

        assert scores == sorted(scores, reverse=True)
        assert all(0 <= s <= 100 for s in scores)

    @pytest.mark.asyncio
    async def test_ties_broken_by_shorter_duration(self):
        slow = _candidate("police", name="slow", lat=19.10)
        fast = _candidate("police", name="fast", lat=19.11)
        # same score (100 - 10 - 0 - 0), different durations
        provider = FakeGeoProvider(routes={
            slow.location: [make_route(0, 600, steps=0)],
            fast.location: [make_route(0, 599.99, steps=0)],
        })
        weights = ScoringWeights(duration_cap=5.0)

        options = await RouteScorer(provider, weights=weights).score_and_rank(MUMBAI, [slow, fast], DisasterContext())

        assert options[0].composite_score == options[1].composite_score
        assert [o.candidate.name for o in options] == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_unroutable_candidates_dropped(self, flood_provider, stadium):
        flood_provider.routes[stadium.location] = ProviderError("ZERO_RESULTS")
        context = DisasterContext(DisasterType.FLOOD)
        candidates = await SafeZoneSelector(flood_provider).find_candidates(MUMBAI, context)

        options = await RouteScorer(flood_provider).score_and_rank(MUMBAI, candidates, context)

        assert [o.candidate.category for o in options] == ["school"]

    @pytest.mark.asyncio
    async def test_slow_candidate_times_out_alone(self, flood_provider, stadium):
        flood_provider.delays[stadium.location] = 5.0
        context = DisasterContext(DisasterType.FLOOD)
        candidates = await SafeZoneSelector(flood_provider).find_candidates(MUMBAI, context)

        options = await RouteScorer(flood_provider, timeout_s=0.1).score_and_rank(MUMBAI, candidates, context)

        assert [o.candidate.category for o in options] == ["school"]

    @pytest.mark.asyncio
    async def test_all_routing_failures_raise(self, flood_provider, school, stadium):
        flood_provider.routes[school.location] = ProviderError("NOT_FOUND")
        flood_provider.routes[stadium.location] = ProviderError("NOT_FOUND")
        context = DisasterContext(DisasterType.FLOOD)
        candidates = await SafeZoneSelector(flood_provider).find_candidates(MUMBAI, context)

        with pytest.raises(ProviderError):
            await RouteScorer(flood_provider).score_and_rank(MUMBAI, candidates, context)

    @pytest.mark.asyncio
    async def test_empty_route_list_counts_as_failure(self):
        target = _candidate("police")
        provider = FakeGeoProvider(routes={target.location: []})

        with pytest.raises(ProviderError):
            await RouteScorer(provider).score_and_rank(MUMBAI, [target], DisasterContext())
