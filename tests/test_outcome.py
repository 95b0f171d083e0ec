import pytest

from fleet_optimizer.capacity import estimate_capacity
from fleet_optimizer.models import FleetSnapshot, PerDriverCapacity, SimulationInput, TrafficLevel
from fleet_optimizer.outcome import (
    average_lateness_probability,
    estimate_outcome,
    split_by_traffic,
)

from conftest import make_route


def run_outcome(inputs, fleet, engine_config):
    capacity = estimate_capacity(inputs, fleet, engine_config)
    return estimate_outcome(capacity, inputs, fleet, engine_config)


def test_medium_dominant_fleet(medium_fleet, default_inputs, engine_config):
    outcome = run_outcome(default_inputs, medium_fleet, engine_config)
    # (3 * 0.12 + 0.05 + 0.25) / 5
    assert outcome.lateness_probability == pytest.approx(0.132)
    assert outcome.total_deliveries == 160
    assert outcome.on_time_deliveries == 139
    assert outcome.late_deliveries == 21
    assert outcome.driver_hours == pytest.approx(120.0)


def test_elapsed_time_includes_traffic_delay(medium_fleet, default_inputs, engine_config):
    outcome = run_outcome(default_inputs, medium_fleet, engine_config)
    expected = (3 * 45 * 1.15 + 30 * 1.0 + 60 * 1.35) / 5
    assert outcome.average_elapsed_minutes == pytest.approx(expected)
    assert outcome.average_elapsed_minutes > 45


def test_deliveries_split_by_traffic_sums_to_total(medium_fleet, default_inputs, engine_config):
    outcome = run_outcome(default_inputs, medium_fleet, engine_config)
    split = outcome.deliveries_by_traffic
    assert sum(split.values()) == outcome.total_deliveries
    assert split[TrafficLevel.MEDIUM] == 96
    assert split[TrafficLevel.LOW] == 32
    assert split[TrafficLevel.HIGH] == 32


def test_split_with_remainder():
    fleet = FleetSnapshot(routes=(
        make_route(TrafficLevel.LOW), make_route(TrafficLevel.MEDIUM), make_route(TrafficLevel.HIGH),
    ))
    split = split_by_traffic(10, fleet)
    assert sum(split.values()) == 10
    assert all(part in (3, 4) for part in split.values())


def test_empty_fleet_treated_as_medium_traffic(empty_fleet, default_inputs, engine_config):
    outcome = run_outcome(default_inputs, empty_fleet, engine_config)
    assert outcome.lateness_probability == engine_config.lateness_probability_medium
    assert outcome.total_deliveries == 160
    assert outcome.on_time_deliveries == 141
    assert outcome.deliveries_by_traffic[TrafficLevel.MEDIUM] == 160


def test_zero_total_means_zero_on_time(medium_fleet, engine_config):
    inputs = SimulationInput(driver_count=1, max_hours_per_day=1e-9)
    outcome = run_outcome(inputs, medium_fleet, engine_config)
    assert outcome.total_deliveries == 0
    assert outcome.on_time_deliveries == 0
    assert outcome.on_time_rate == 0.0


def test_total_deliveries_never_decrease_with_more_drivers(medium_fleet, engine_config):
    previous = -1
    for drivers in range(1, 51):
        outcome = run_outcome(SimulationInput(driver_count=drivers, max_hours_per_day=7.5),
                              medium_fleet, engine_config)
        assert outcome.total_deliveries >= previous
        previous = outcome.total_deliveries


def test_more_high_traffic_never_increases_on_time(engine_config):
    # Same base times throughout so total deliveries stay fixed
    inputs = SimulationInput(driver_count=15, max_hours_per_day=8)
    previous_on_time = None
    total = None
    for high_routes in range(0, 5):
        routes = tuple(
            make_route(TrafficLevel.HIGH if i < high_routes else TrafficLevel.MEDIUM)
            for i in range(4)
        )
        outcome = run_outcome(inputs, FleetSnapshot(routes=routes), engine_config)
        if total is not None:
            assert outcome.total_deliveries == total
            assert outcome.on_time_deliveries <= previous_on_time
        total = outcome.total_deliveries
        previous_on_time = outcome.on_time_deliveries


def test_lateness_ordering_by_traffic(engine_config):
    def single(level):
        return average_lateness_probability(FleetSnapshot(routes=(make_route(level),)), engine_config)

    assert single(TrafficLevel.LOW) < single(TrafficLevel.MEDIUM) < single(TrafficLevel.HIGH)


def test_on_time_never_exceeds_total(engine_config):
    fleet = FleetSnapshot(routes=(make_route(TrafficLevel.LOW),))
    capacity = PerDriverCapacity(per_driver=0.5, aggregate=0.5, average_route_time_minutes=45)
    outcome = estimate_outcome(capacity, SimulationInput(driver_count=1, max_hours_per_day=0.375),
                               fleet, engine_config)
    assert outcome.total_deliveries == 1
    assert 0 <= outcome.on_time_deliveries <= outcome.total_deliveries
