"""
Test Configuration and Shared Fixtures

Fixtures:
- flood_provider: Mumbai flood scenario (school 2 km, stadium 5 km)
- fire_provider: fire scenario including a gas station result
- planner: EvacuationService over flood_provider without advisory

Author: SafeEscape Project
License: AGPL-3.0
"""

import logging

import pytest

from safeescape.services.evacuation import EvacuationService
from tests.fakes import FakeGeoProvider, make_place, make_route

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


# Mark test categories for selective running
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "api: API endpoint tests")
    config.addinivalue_line("markers", "planner: Safe-zone, scoring and planning tests")
    config.addinivalue_line("markers", "slow: Slow-running tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        path = str(item.fspath)
        if "test_api" in path:
            item.add_marker(pytest.mark.api)
        elif any(name in path for name in ("test_safe_zones", "test_route_scorer", "test_evacuation", "test_advisory")):
            item.add_marker(pytest.mark.planner)
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def school():
    return make_place("Dadar Municipal School", "school", 19.094, 72.8777, place_id="school-1", address="Dadar West")


@pytest.fixture
def stadium():
    return make_place("Wankhede Stadium", "stadium", 19.121, 72.8777, place_id="stadium-1", address="Churchgate")


@pytest.fixture
def flood_provider(school, stadium):
    """School 2 km / 10 min walk, stadium 5 km / 25 min walk."""
    return FakeGeoProvider(
        places={"school": [school], "stadium": [stadium]},
        routes={
            school.location: [make_route(2000, 600, steps=4)],
            stadium.location: [make_route(5000, 1500, steps=6)],
        },
    )


@pytest.fixture
def fire_provider():
    hospital = make_place("KEM Hospital", "hospital", 19.0, 72.84, place_id="h-1")
    fire_station = make_place("Byculla Fire Station", "fire_station", 18.98, 72.83, place_id="f-1")
    gas_station = make_place("Fuel Point", "gas_station", 18.96, 72.82, place_id="g-1")
    return FakeGeoProvider(
        places={
            "hospital": [hospital, gas_station],
            "fire_station": [fire_station],
        },
        routes={
            hospital.location: [make_route(3000, 480, steps=5)],
            fire_station.location: [make_route(4000, 600, steps=7)],
            gas_station.location: [make_route(500, 60, steps=1)],
        },
    )


@pytest.fixture
def planner(flood_provider):
    return EvacuationService(flood_provider, advisory=None, advisory_timeout_s=1.0, geo_timeout_s=1.0)
