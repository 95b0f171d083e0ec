import dataclasses
import math
from datetime import time

import pytest

from fleet_optimizer.errors import InvalidInputError
from fleet_optimizer.fleet import build_snapshot, sample_fleet
from fleet_optimizer.models import FleetSnapshot, SimulationInput, TrafficLevel
from fleet_optimizer.simulation import SimulationSession, run_simulation

from conftest import make_route


def reconciles(result):
    return result.total_profit == result.revenue + result.bonuses - result.fuel_cost - result.penalties


def test_scenario_fifteen_drivers_eight_hours(medium_fleet, default_inputs, engine_config):
    result = run_simulation(default_inputs, medium_fleet, engine_config)
    assert 150 <= result.total_deliveries <= 190
    assert 0.80 < result.on_time_rate < 1.0
    assert reconciles(result)
    assert result.total_deliveries == 160
    assert result.on_time_deliveries == 139
    assert result.total_profit == 140750
    assert result.efficiency_score == pytest.approx(100 * (0.7 * 139 / 160 + 0.3 * (160 / 120) / 1.5))


def test_runs_with_default_config(medium_fleet, default_inputs, engine_config):
    assert run_simulation(default_inputs, medium_fleet) == run_simulation(default_inputs, medium_fleet, engine_config)


def test_deterministic(medium_fleet, default_inputs, engine_config):
    first = run_simulation(default_inputs, medium_fleet, engine_config)
    second = run_simulation(default_inputs, medium_fleet, engine_config)
    assert first == second
    assert dataclasses.astuple(first) == dataclasses.astuple(second)


def test_fleet_snapshot_not_modified(medium_fleet, default_inputs, engine_config):
    before = dataclasses.replace(medium_fleet)
    run_simulation(default_inputs, medium_fleet, engine_config)
    assert medium_fleet == before


@pytest.mark.parametrize("drivers", [1, 7, 15, 33, 50])
@pytest.mark.parametrize("hours", [1e-9, 0.5, 4, 7.5, 12])
def test_invariants_hold_across_inputs(drivers, hours, medium_fleet, engine_config):
    result = run_simulation(SimulationInput(driver_count=drivers, max_hours_per_day=hours),
                            medium_fleet, engine_config)
    assert reconciles(result)
    assert 0 <= result.on_time_deliveries <= result.total_deliveries
    assert 0.0 <= result.efficiency_score <= 100.0
    assert min(result.fuel_cost, result.penalties, result.bonuses, result.revenue) >= 0


def test_bonus_case_reconciles(medium_fleet, default_inputs, engine_config):
    result = run_simulation(default_inputs, medium_fleet, engine_config.replace(on_time_bonus_threshold=0.5))
    assert result.bonuses > 0
    assert reconciles(result)


def test_empty_fleet_produces_finite_result(empty_fleet, default_inputs, engine_config):
    result = run_simulation(default_inputs, empty_fleet, engine_config)
    assert result.total_deliveries == 160
    assert math.isfinite(result.efficiency_score)
    assert reconciles(result)


def test_shift_end_is_explanatory_only(medium_fleet, engine_config):
    morning = run_simulation(SimulationInput(15, time(9, 0), 8), medium_fleet, engine_config)
    night = run_simulation(SimulationInput(15, time(20, 30), 8), medium_fleet, engine_config)
    assert morning.shift_end_time == time(17, 0)
    assert night.shift_end_time == time(4, 30)
    assert morning.total_profit == night.total_profit
    assert morning.efficiency_score == night.efficiency_score


def test_derived_properties(medium_fleet, default_inputs, engine_config):
    result = run_simulation(default_inputs, medium_fleet, engine_config)
    assert result.late_deliveries == 21
    assert result.total_costs == result.fuel_cost + result.penalties
    assert result.deliveries_per_driver == pytest.approx(160 / 15)
    assert result.profit_per_delivery == pytest.approx(140750 / 160)
    display = result.to_dict()
    assert display["Total Profit"] == 140750
    assert display["On-Time Deliveries"] == "139/160"
    assert display["Shift"] == "09:00-17:00"
    assert display["Traffic Mix"] == "Low 32 / Medium 96 / High 32"


def test_result_carries_traffic_breakdown(medium_fleet, default_inputs, engine_config):
    result = run_simulation(default_inputs, medium_fleet, engine_config)
    assert result.average_elapsed_minutes == pytest.approx((3 * 45 * 1.15 + 30 * 1.0 + 60 * 1.35) / 5)
    assert result.deliveries_by_traffic == {TrafficLevel.LOW: 32, TrafficLevel.MEDIUM: 96, TrafficLevel.HIGH: 32}
    assert sum(result.deliveries_by_traffic.values()) == result.total_deliveries


@pytest.mark.parametrize("start", ["09:00", None, 540])
def test_non_time_shift_start_is_rejected(start, medium_fleet, engine_config):
    with pytest.raises(InvalidInputError, match="shift_start_time"):
        run_simulation(SimulationInput(15, start, 8), medium_fleet, engine_config)


def test_sample_fleet_snapshot():
    snapshot = build_snapshot(sample_fleet())
    result = run_simulation(SimulationInput(), snapshot)
    # Active routes: 45, 65 and 25 minutes
    assert result.total_deliveries == 160
    assert result.on_time_deliveries == 138


def test_more_high_traffic_lowers_profit(default_inputs, engine_config):
    calm = FleetSnapshot(routes=(make_route(TrafficLevel.LOW), make_route(TrafficLevel.MEDIUM)))
    busy = FleetSnapshot(routes=(make_route(TrafficLevel.HIGH), make_route(TrafficLevel.MEDIUM)))
    assert (run_simulation(default_inputs, busy, engine_config).total_profit
            < run_simulation(default_inputs, calm, engine_config).total_profit)


class TestSimulationSession:

    def test_starts_with_defaults(self, medium_fleet):
        session = SimulationSession(medium_fleet)
        assert session.inputs == SimulationInput()
        assert session.result is None
        assert not session.has_result

    def test_run_replaces_result(self, medium_fleet):
        session = SimulationSession(medium_fleet)
        first = session.run(SimulationInput(driver_count=10))
        second = session.run(SimulationInput(driver_count=20))
        assert session.result is second
        assert second.total_deliveries > first.total_deliveries
        assert session.inputs.driver_count == 20

    @pytest.mark.parametrize("bad", [
        SimulationInput(driver_count=0),
        SimulationInput(driver_count=51),
        SimulationInput(max_hours_per_day=0),
        SimulationInput(max_hours_per_day=13),
        SimulationInput(max_hours_per_day=float("nan")),
        SimulationInput(shift_start_time="09:00"),
    ])
    def test_invalid_run_keeps_previous_state(self, bad, medium_fleet):
        session = SimulationSession(medium_fleet)
        good_inputs = SimulationInput(driver_count=12, max_hours_per_day=6)
        previous = session.run(good_inputs)

        with pytest.raises(InvalidInputError):
            session.run(bad)

        assert session.result is previous
        assert session.inputs == good_inputs

    def test_invalid_first_run_leaves_no_result(self, medium_fleet):
        session = SimulationSession(medium_fleet)
        with pytest.raises(InvalidInputError):
            session.run(SimulationInput(driver_count=0))
        assert session.result is None

    def test_reset(self, medium_fleet):
        session = SimulationSession(medium_fleet)
        session.run(SimulationInput(driver_count=30, shift_start_time=time(6, 0), max_hours_per_day=10))
        session.reset()
        assert session.result is None
        assert session.inputs == SimulationInput()

    def test_run_with_new_fleet_and_config(self, medium_fleet, empty_fleet, engine_config):
        session = SimulationSession(medium_fleet)
        richer = engine_config.replace(average_route_value=2000)
        result = session.run(SimulationInput(), fleet=empty_fleet, engine_config=richer)
        assert session.fleet is empty_fleet
        assert session.engine_config is richer
        assert result.revenue == 160 * 2000

    def test_rejected_run_keeps_fleet_and_config(self, medium_fleet, empty_fleet, engine_config):
        session = SimulationSession(medium_fleet, engine_config)
        previous = session.run(SimulationInput())

        with pytest.raises(InvalidInputError):
            session.run(SimulationInput(driver_count=0), fleet=empty_fleet,
                        engine_config=engine_config.replace(per_late_penalty=0))

        assert session.fleet is medium_fleet
        assert session.engine_config is engine_config
        assert session.result is previous
