"""
@file geo_provider.py
@brief Geo provider interface and Google Maps implementation

@details
The planner reaches places search and directions only through GeoProvider:
- find_nearby(location, radius_m, category) -> list of Place
- route(origin, destination, mode) -> list of RawRoute (best first)

GoogleMapsGeoProvider implements it over the Places Nearby Search and
Directions REST APIs. Requests are blocking (requests library) and are run
in worker threads so concurrent fan-out stays non-blocking for the event
loop. Every failure is raised as ProviderError.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see services.safe_zones for nearby-search fan-out
@see services.route_scorer for per-candidate routing
"""

import asyncio
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from safeescape.core.cache import RedisCache, places_key
from safeescape.core.exceptions import ProviderError, ValidationError
from safeescape.models.evacuation import Location, Place, RawRoute, TravelMode

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0

PLACES_NEARBY_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"

_TAG_RE = re.compile(r"<[^>]+>")


def haversine_distance_m(origin: Location, destination: Location) -> float:
    """
    @brief Great-circle distance between two locations in meters
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [
        origin.latitude, origin.longitude, destination.latitude, destination.longitude
    ])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.asin(math.sqrt(min(1.0, a)))


class GeoProvider(ABC):
    """
    @brief Places-search and routing collaborator
    """

    @abstractmethod
    async def find_nearby(self, location: Location, radius_m: int, category: str) -> List[Place]:
        """Return points of interest of one category around a location."""
        ...

    @abstractmethod
    async def route(self, origin: Location, destination: Location, mode: TravelMode) -> List[RawRoute]:
        """Return one or more routes, best first."""
        ...

    @property
    def configured(self) -> bool:
        return True


class GoogleMapsGeoProvider(GeoProvider):
    """
    @brief Google Maps Platform adapter

    @details
    Nearby-search results are cached in Redis when a cache is connected;
    directions are always fetched live.
    """

    def __init__(
        self,
        api_key: Optional[str],
        timeout_s: float = 5.0,
        cache: Optional[RedisCache] = None,
        cache_ttl_s: int = 300,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.cache = cache
        self.cache_ttl_s = cache_ttl_s
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderError("Google Maps API key is not configured")
        try:
            response = self.session.get(
                url,
                params={**params, "key": self.api_key},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout:
            raise ProviderError(f"Google Maps request timed out after {self.timeout_s}s")
        except requests.RequestException as e:
            raise ProviderError(f"Google Maps request failed: {e}")
        except ValueError as e:
            raise ProviderError(f"Google Maps returned invalid JSON: {e}")

        if not isinstance(data, dict):
            raise ProviderError("Google Maps returned an unexpected payload")
        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            detail = data.get("error_message", "")
            raise ProviderError(f"Google Maps API error: {status} {detail}".strip())
        return data

    async def find_nearby(self, location: Location, radius_m: int, category: str) -> List[Place]:
        cache_key = places_key(location.latitude, location.longitude, radius_m, category)
        if self.cache is not None:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {cache_key}")
                return [self._place_from_cache(item) for item in cached]

        params = {
            "location": f"{location.latitude},{location.longitude}",
            "radius": radius_m,
            "type": category,
        }
        data = await asyncio.to_thread(self._get_json, PLACES_NEARBY_URL, params)
        places = self._parse_places(data, category)
        logger.info(f"Found {len(places)} {category} places")

        if self.cache is not None:
            await self.cache.set(cache_key, [self._place_to_cache(p) for p in places], ttl=self.cache_ttl_s)
        return places

    async def route(self, origin: Location, destination: Location, mode: TravelMode) -> List[RawRoute]:
        params = {
            "origin": f"{origin.latitude},{origin.longitude}",
            "destination": f"{destination.latitude},{destination.longitude}",
            "mode": mode.value,
            "alternatives": "true",
            "language": "en",
        }
        data = await asyncio.to_thread(self._get_json, DIRECTIONS_URL, params)
        routes = self._parse_routes(data)
        if not routes:
            raise ProviderError(f"No route found to {destination.latitude},{destination.longitude}")
        return routes

    @staticmethod
    def _parse_places(data: Dict[str, Any], category: str) -> List[Place]:
        places = []
        try:
            for result in data.get("results", []):
                coords = result["geometry"]["location"]
                places.append(Place(
                    name=result.get("name", "Unnamed location"),
                    location=Location(coords["lat"], coords["lng"]),
                    category=category,
                    address=result.get("vicinity", ""),
                    place_id=result.get("place_id"),
                ))
        except (KeyError, TypeError, ValidationError) as e:
            raise ProviderError(f"Malformed place result: {e}")
        return places

    @staticmethod
    def _parse_routes(data: Dict[str, Any]) -> List[RawRoute]:
        routes = []
        try:
            for route in data.get("routes", []):
                legs = route["legs"]
                steps = [step for leg in legs for step in leg.get("steps", [])]
                routes.append(RawRoute(
                    distance_meters=float(sum(leg["distance"]["value"] for leg in legs)),
                    duration_seconds=float(sum(leg["duration"]["value"] for leg in legs)),
                    step_count=len(steps),
                    warnings=tuple(route.get("warnings", [])),
                    step_instructions=tuple(
                        _TAG_RE.sub(" ", step.get("html_instructions", "")).strip() for step in steps
                    ),
                    summary=route.get("summary", ""),
                ))
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Malformed directions result: {e}")
        return routes

    @staticmethod
    def _place_to_cache(place: Place) -> Dict[str, Any]:
        return {
            "name": place.name,
            "lat": place.location.latitude,
            "lng": place.location.longitude,
            "category": place.category,
            "address": place.address,
            "place_id": place.place_id,
        }

    @staticmethod
    def _place_from_cache(item: Dict[str, Any]) -> Place:
        return Place(
            name=item["name"],
            location=Location(item["lat"], item["lng"]),
            category=item["category"],
            address=item.get("address", ""),
            place_id=item.get("place_id"),
        )
