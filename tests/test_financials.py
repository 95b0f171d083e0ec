import pytest

from fleet_optimizer.financials import (
    distance_factor,
    efficiency_score,
    estimate_financials,
    route_value,
)
from fleet_optimizer.models import DeliveryOutcome, FleetSnapshot, SimulationInput, TrafficLevel

from conftest import make_route


def outcome(total, on_time, driver_hours=120.0):
    return DeliveryOutcome(
        total_deliveries=total,
        on_time_deliveries=on_time,
        lateness_probability=0.1,
        average_elapsed_minutes=45.0,
        driver_hours=driver_hours,
    )


def test_breakdown_for_medium_fleet(medium_fleet, default_inputs, engine_config):
    breakdown = estimate_financials(outcome(160, 139), default_inputs, medium_fleet, engine_config)
    assert breakdown.revenue == 160000
    assert breakdown.fuel_cost == 14000
    assert breakdown.penalties == 21 * 250
    assert breakdown.bonuses == 0
    assert breakdown.total_profit == 140750


def test_profit_reconciles(medium_fleet, default_inputs, engine_config):
    b = estimate_financials(outcome(97, 91), default_inputs, medium_fleet, engine_config)
    assert b.total_profit == b.revenue + b.bonuses - b.fuel_cost - b.penalties


def test_bonus_is_a_step_at_threshold(medium_fleet, default_inputs, engine_config):
    at_threshold = estimate_financials(outcome(100, 90), default_inputs, medium_fleet, engine_config)
    below = estimate_financials(outcome(100, 89), default_inputs, medium_fleet, engine_config)
    assert at_threshold.bonuses == 90 * 50
    assert below.bonuses == 0


def test_lower_threshold_pays_bonus(medium_fleet, default_inputs, engine_config):
    cfg = engine_config.replace(on_time_bonus_threshold=0.85)
    b = estimate_financials(outcome(160, 139), default_inputs, medium_fleet, cfg)
    assert b.bonuses == 139 * 50
    assert b.total_profit == 160000 + 6950 - 14000 - 5250


def test_no_deliveries_no_bonus(medium_fleet, default_inputs, engine_config):
    cfg = engine_config.replace(on_time_bonus_threshold=0.0)
    b = estimate_financials(outcome(0, 0), default_inputs, medium_fleet, cfg)
    assert b.revenue == 0
    assert b.bonuses == 0
    assert b.penalties == 0
    assert b.total_profit == -b.fuel_cost


def test_fuel_scales_with_route_distance(default_inputs, engine_config):
    short = FleetSnapshot(routes=(make_route(TrafficLevel.LOW, distance=7.5),))
    long = FleetSnapshot(routes=(make_route(TrafficLevel.LOW, distance=30),))
    fuel_short = estimate_financials(outcome(10, 10), default_inputs, short, engine_config).fuel_cost
    fuel_long = estimate_financials(outcome(10, 10), default_inputs, long, engine_config).fuel_cost
    assert fuel_short == 8000 + 15 * 400 * 0.5
    assert fuel_long == 8000 + 15 * 400 * 2
    assert distance_factor(FleetSnapshot(), engine_config) == 1.0


def test_fuel_grows_with_driver_count(medium_fleet, engine_config):
    costs = [
        estimate_financials(outcome(10, 10), SimulationInput(driver_count=n), medium_fleet, engine_config).fuel_cost
        for n in (1, 10, 50)
    ]
    assert costs == sorted(costs)
    assert costs[0] < costs[-1]


def test_order_history_overrides_route_value(default_inputs, engine_config):
    fleet = FleetSnapshot(routes=(make_route(TrafficLevel.LOW),), average_order_value=1330.0)
    assert route_value(fleet, engine_config) == 1330.0
    b = estimate_financials(outcome(10, 10), default_inputs, fleet, engine_config)
    assert b.revenue == 13300
    assert route_value(FleetSnapshot(), engine_config) == engine_config.average_route_value


def test_currency_rounds_half_up(default_inputs, engine_config):
    cfg = engine_config.replace(average_route_value=10.25, per_late_penalty=0.5)
    b = estimate_financials(outcome(2, 1), default_inputs, FleetSnapshot(), cfg)
    # 2 * 10.25 = 20.5 and 1 * 0.5 = 0.5
    assert b.revenue == 21
    assert b.penalties == 1


def test_efficiency_score_blend(engine_config):
    score = efficiency_score(outcome(160, 139), engine_config)
    expected = 100 * (0.7 * 139 / 160 + 0.3 * (160 / 120) / 1.5)
    assert score == pytest.approx(expected)


def test_efficiency_score_bounded(engine_config):
    perfect = efficiency_score(outcome(1000, 1000, driver_hours=10), engine_config)
    empty = efficiency_score(outcome(0, 0), engine_config)
    assert perfect == pytest.approx(100.0)
    assert empty == 0.0


def test_efficiency_score_monotonic_in_reliability(engine_config):
    scores = [efficiency_score(outcome(100, on_time), engine_config) for on_time in range(0, 101, 10)]
    assert scores == sorted(scores)
