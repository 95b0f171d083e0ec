# fleet_optimizer/outcome.py
"""
Outcome estimator: turn capacity into completed, on-time and late deliveries.

Each route contributes a lateness probability keyed by its traffic level.
The fleet-wide probability is the plain average over routes, so a fleet with
more High-traffic routes is always later on average. Traffic also stretches
elapsed route time, which is reported alongside the counts.
"""

from __future__ import annotations

import logging
import math
from typing import Dict

from . import config, utils
from .models import (
    SimulationInput,
    FleetSnapshot,
    PerDriverCapacity,
    DeliveryOutcome,
    TrafficLevel,
)

logger = logging.getLogger(__name__)


def lateness_probabilities(engine_config: config.EngineConfig) -> Dict[TrafficLevel, float]:
    """Lateness probability lookup table for a config."""
    return {
        TrafficLevel.LOW: engine_config.lateness_probability_low,
        TrafficLevel.MEDIUM: engine_config.lateness_probability_medium,
        TrafficLevel.HIGH: engine_config.lateness_probability_high,
    }


def traffic_time_multipliers(engine_config: config.EngineConfig) -> Dict[TrafficLevel, float]:
    """Elapsed-time multiplier lookup table for a config."""
    return {
        TrafficLevel.LOW: engine_config.traffic_time_multiplier_low,
        TrafficLevel.MEDIUM: engine_config.traffic_time_multiplier_medium,
        TrafficLevel.HIGH: engine_config.traffic_time_multiplier_high,
    }


def average_lateness_probability(fleet: FleetSnapshot, engine_config: config.EngineConfig) -> float:
    """
    Route-weighted mean lateness probability for the fleet.

    An empty fleet is treated as uniformly Medium traffic.
    """
    table = lateness_probabilities(engine_config)
    if fleet.is_empty:
        return table[TrafficLevel.MEDIUM]
    return sum(table[r.traffic_level] for r in fleet.routes) / len(fleet.routes)


def average_elapsed_minutes(
    fleet: FleetSnapshot,
    capacity: PerDriverCapacity,
    engine_config: config.EngineConfig
) -> float:
    """Traffic-adjusted mean route time in minutes."""
    table = traffic_time_multipliers(engine_config)
    if capacity.used_default_route_time:
        return capacity.average_route_time_minutes * table[TrafficLevel.MEDIUM]
    return sum(
        r.base_time_minutes * table[r.traffic_level] for r in fleet.routes
    ) / len(fleet.routes)


def split_by_traffic(total: int, fleet: FleetSnapshot) -> Dict[TrafficLevel, int]:
    """
    Apportion total deliveries across traffic levels by route share.

    Uses largest-remainder apportionment so the parts always sum to total.
    """
    if fleet.is_empty:
        return {level: (total if level is TrafficLevel.MEDIUM else 0) for level in TrafficLevel}

    counts = {level: 0 for level in TrafficLevel}
    for route in fleet.routes:
        counts[route.traffic_level] += 1

    exact = {level: total * counts[level] / len(fleet.routes) for level in TrafficLevel}
    parts = {level: int(math.floor(exact[level])) for level in TrafficLevel}

    remainder = total - sum(parts.values())
    by_fraction = sorted(
        TrafficLevel,
        key=lambda level: (exact[level] - parts[level], counts[level]),
        reverse=True
    )
    for level in by_fraction[:remainder]:
        parts[level] += 1
    return parts


def estimate_outcome(
    capacity: PerDriverCapacity,
    inputs: SimulationInput,
    fleet: FleetSnapshot,
    engine_config: config.EngineConfig
) -> DeliveryOutcome:
    """
    Estimate completed and on-time deliveries for a validated input.

    Args:
        capacity: Output of estimate_capacity for the same inputs
        inputs: Operating parameters (already validated)
        fleet: Route snapshot providing the traffic mix
        engine_config: Lateness and traffic-time tables

    Returns:
        DeliveryOutcome with integer counts, on_time <= total
    """
    total = utils.round_half_up(capacity.per_driver * inputs.driver_count)

    lateness = average_lateness_probability(fleet, engine_config)
    if total == 0:
        on_time = 0
    else:
        on_time = min(total, utils.round_half_up(total * (1.0 - lateness)))

    outcome = DeliveryOutcome(
        total_deliveries=total,
        on_time_deliveries=on_time,
        lateness_probability=lateness,
        average_elapsed_minutes=average_elapsed_minutes(fleet, capacity, engine_config),
        driver_hours=inputs.driver_count * inputs.max_hours_per_day,
        deliveries_by_traffic=split_by_traffic(total, fleet),
    )

    logger.debug(
        "Outcome: %d deliveries, %d on time (lateness %.3f)",
        outcome.total_deliveries, outcome.on_time_deliveries, lateness
    )
    return outcome
