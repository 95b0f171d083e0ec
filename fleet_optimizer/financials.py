# fleet_optimizer/financials.py
"""
Financial model: revenue, costs and the efficiency score for one run.

Line items:
1. Revenue: deliveries x average route value (order history when available)
2. Fuel: fixed base + per-driver rate scaled by average route distance
3. Penalties: late deliveries x per-late penalty
4. Bonuses: on-time deliveries x per-on-time bonus, only at or above the
   on-time threshold (a step, not a slope)

Every line item is computed as a real number and rounded once, here at the
output boundary. Profit is then computed from the rounded items, so the
breakdown shown to users always adds up exactly.
"""

from __future__ import annotations

import logging

from . import config, utils
from .models import SimulationInput, FleetSnapshot, DeliveryOutcome, FinancialBreakdown

logger = logging.getLogger(__name__)


def route_value(fleet: FleetSnapshot, engine_config: config.EngineConfig) -> float:
    """Revenue per delivery: historical order value if known, else configured."""
    if fleet.average_order_value is not None and fleet.average_order_value >= 0:
        return fleet.average_order_value
    return engine_config.average_route_value


def distance_factor(fleet: FleetSnapshot, engine_config: config.EngineConfig) -> float:
    """Average route distance relative to the reference distance (1.0 when empty)."""
    avg_distance = fleet.average_distance_km
    if avg_distance is None:
        return 1.0
    return avg_distance / engine_config.reference_route_distance_km


def fuel_cost(inputs: SimulationInput, fleet: FleetSnapshot, engine_config: config.EngineConfig) -> float:
    return (
        engine_config.base_fuel_cost
        + inputs.driver_count * engine_config.per_driver_fuel_rate * distance_factor(fleet, engine_config)
    )


def bonus_earned(on_time_rate: float, engine_config: config.EngineConfig) -> bool:
    return on_time_rate >= engine_config.on_time_bonus_threshold


def efficiency_score(
    outcome: DeliveryOutcome,
    engine_config: config.EngineConfig
) -> float:
    """
    Blend reliability and productivity into a 0-100 score.

    Reliability is the on-time rate. Productivity is deliveries per
    driver-hour as a fraction of the target rate, capped at 1.0. The weights
    are normalised so the score never exceeds 100.
    """
    deliveries_per_hour = outcome.total_deliveries / outcome.driver_hours
    productivity = min(1.0, deliveries_per_hour / engine_config.target_deliveries_per_driver_hour)

    total_weight = engine_config.reliability_weight + engine_config.productivity_weight
    score = 100.0 * (
        engine_config.reliability_weight * outcome.on_time_rate
        + engine_config.productivity_weight * productivity
    ) / total_weight
    return utils.clamp(score, 0.0, 100.0)


def estimate_financials(
    outcome: DeliveryOutcome,
    inputs: SimulationInput,
    fleet: FleetSnapshot,
    engine_config: config.EngineConfig
) -> FinancialBreakdown:
    """
    Compute the full financial breakdown for an outcome.

    Args:
        outcome: Delivery counts from estimate_outcome
        inputs: Operating parameters (already validated)
        fleet: Route snapshot (distances, optional order history)
        engine_config: Operating economics

    Returns:
        FinancialBreakdown with integer currency fields that reconcile to
        total_profit exactly
    """
    revenue = utils.round_half_up(outcome.total_deliveries * route_value(fleet, engine_config))
    fuel = utils.round_half_up(fuel_cost(inputs, fleet, engine_config))
    penalties = utils.round_half_up(outcome.late_deliveries * engine_config.per_late_penalty)

    bonuses = 0
    if outcome.total_deliveries > 0 and bonus_earned(outcome.on_time_rate, engine_config):
        bonuses = utils.round_half_up(outcome.on_time_deliveries * engine_config.per_on_time_bonus)

    total_profit = revenue + bonuses - fuel - penalties

    breakdown = FinancialBreakdown(
        revenue=revenue,
        fuel_cost=fuel,
        penalties=penalties,
        bonuses=bonuses,
        total_profit=total_profit,
        efficiency_score=efficiency_score(outcome, engine_config),
    )
    logger.debug(
        "Financials: revenue=%d bonuses=%d fuel=%d penalties=%d profit=%d",
        revenue, bonuses, fuel, penalties, total_profit
    )
    return breakdown
