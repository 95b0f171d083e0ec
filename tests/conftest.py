from datetime import time

import pytest

from fleet_optimizer.config import default_config
from fleet_optimizer.models import FleetSnapshot, RouteProfile, SimulationInput, TrafficLevel


def make_route(traffic: TrafficLevel, base_time: float = 45.0, distance: float = 15.0) -> RouteProfile:
    return RouteProfile(distance_km=distance, traffic_level=traffic, base_time_minutes=base_time)


@pytest.fixture
def engine_config():
    return default_config()


@pytest.fixture
def medium_fleet():
    """Medium-dominant fleet averaging 45 min and 15 km per route."""
    return FleetSnapshot(
        routes=(
            make_route(TrafficLevel.MEDIUM, 45, 15),
            make_route(TrafficLevel.MEDIUM, 45, 15),
            make_route(TrafficLevel.MEDIUM, 45, 15),
            make_route(TrafficLevel.LOW, 30, 10),
            make_route(TrafficLevel.HIGH, 60, 20),
        ),
        driver_count=20,
        average_driver_efficiency=88.0,
    )


@pytest.fixture
def empty_fleet():
    return FleetSnapshot()


@pytest.fixture
def default_inputs():
    return SimulationInput(driver_count=15, shift_start_time=time(9, 0), max_hours_per_day=8)
