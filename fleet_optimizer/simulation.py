# fleet_optimizer/simulation.py
"""
Simulation Engine for the FleetOptimizer what-if simulator.

This module composes the three estimation stages into a single run:

    SimulationInput + FleetSnapshot
        -> estimate_capacity    (capacity.py)
        -> estimate_outcome     (outcome.py)
        -> estimate_financials  (financials.py)
        -> SimulationResult

A run is a pure, synchronous function of its inputs and the engine config.
Nothing is cached between runs and the fleet snapshot is never modified, so
two runs with the same arguments return equal results.

SimulationSession wraps the engine with the state a dashboard needs: the
current inputs and the most recent result. A rejected run leaves both as
they were.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import config, utils
from .capacity import estimate_capacity
from .outcome import estimate_outcome
from .financials import estimate_financials
from .models import SimulationInput, FleetSnapshot, SimulationResult

logger = logging.getLogger(__name__)


def run_simulation(
    inputs: SimulationInput,
    fleet: FleetSnapshot,
    engine_config: Optional[config.EngineConfig] = None
) -> SimulationResult:
    """
    Run the full capacity -> outcome -> financials pipeline.

    Args:
        inputs: Operating parameters for the run
        fleet: Route and roster snapshot assembled by the caller
        engine_config: Operating economics; module defaults when omitted

    Returns:
        A new, immutable SimulationResult

    Raises:
        InvalidInputError: If inputs are out of bounds (before any stage runs)
    """
    if engine_config is None:
        engine_config = config.default_config()

    capacity = estimate_capacity(inputs, fleet, engine_config)
    outcome = estimate_outcome(capacity, inputs, fleet, engine_config)
    financials = estimate_financials(outcome, inputs, fleet, engine_config)

    result = SimulationResult(
        total_profit=financials.total_profit,
        efficiency_score=financials.efficiency_score,
        on_time_deliveries=outcome.on_time_deliveries,
        total_deliveries=outcome.total_deliveries,
        fuel_cost=financials.fuel_cost,
        penalties=financials.penalties,
        bonuses=financials.bonuses,
        revenue=financials.revenue,
        driver_count=int(inputs.driver_count),
        max_hours_per_day=float(inputs.max_hours_per_day),
        shift_start_time=inputs.shift_start_time,
        shift_end_time=utils.add_hours_to_time(inputs.shift_start_time, inputs.max_hours_per_day),
        average_elapsed_minutes=outcome.average_elapsed_minutes,
        deliveries_by_traffic=dict(outcome.deliveries_by_traffic),
    )
    logger.info(
        "Simulated %d drivers x %gh: %d deliveries, %d on time, profit %d",
        result.driver_count, result.max_hours_per_day,
        result.total_deliveries, result.on_time_deliveries, result.total_profit
    )
    return result


class SimulationSession:
    """
    Holds the current simulation inputs and the most recent result.

    The dashboard keeps one session per user. Re-running replaces the result
    wholesale; a run that fails validation leaves the previous result and
    inputs untouched.

    Attributes:
        fleet: Snapshot used for every run in this session
        engine_config: Economics used for every run in this session
        inputs: The last inputs that produced a result (or the defaults)
        result: The most recent result, or None before the first run
    """

    def __init__(
        self,
        fleet: FleetSnapshot,
        engine_config: Optional[config.EngineConfig] = None
    ) -> None:
        self.fleet: FleetSnapshot = fleet
        self.engine_config: config.EngineConfig = engine_config or config.default_config()
        self.inputs: SimulationInput = SimulationInput()
        self.result: Optional[SimulationResult] = None

    def run(
        self,
        inputs: SimulationInput,
        fleet: Optional[FleetSnapshot] = None,
        engine_config: Optional[config.EngineConfig] = None
    ) -> SimulationResult:
        """
        Run a simulation and, only if it succeeds, make it current.

        A fleet or engine_config passed here replaces the session's own
        once the run succeeds; a rejected run keeps the old ones.
        """
        fleet = self.fleet if fleet is None else fleet
        engine_config = self.engine_config if engine_config is None else engine_config
        result = run_simulation(inputs, fleet, engine_config)
        self.fleet = fleet
        self.engine_config = engine_config
        self.inputs = inputs
        self.result = result
        return result

    def reset(self) -> None:
        """Clear the result and restore the default inputs."""
        self.inputs = SimulationInput()
        self.result = None

    @property
    def has_result(self) -> bool:
        return self.result is not None
