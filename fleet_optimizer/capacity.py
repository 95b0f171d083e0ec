# fleet_optimizer/capacity.py
"""
Capacity model: how many deliveries can each driver make in a shift?

A driver completes one route per average route time, so per-driver capacity
is simply the shift length divided by the fleet's average route time. This is
also the only place simulation inputs are validated; later stages trust them.
"""

from __future__ import annotations

import logging
import math
import numbers
from datetime import time

from . import config
from .errors import InvalidInputError
from .models import SimulationInput, FleetSnapshot, PerDriverCapacity

logger = logging.getLogger(__name__)


def validate_input(inputs: SimulationInput) -> None:
    """
    Check driver count, hour cap and shift start against their bounds.

    Raises:
        InvalidInputError: If driver_count is not an integer in 1..50,
            max_hours_per_day is not a finite number in (0, 12], or
            shift_start_time is not a datetime.time
    """
    count = inputs.driver_count
    if isinstance(count, bool) or not isinstance(count, numbers.Real):
        raise InvalidInputError(f"driver_count must be a number, got {count!r}")
    if not math.isfinite(count) or count != int(count):
        raise InvalidInputError(f"driver_count must be a whole number, got {count}")
    if not config.MIN_DRIVERS <= count <= config.MAX_DRIVERS:
        raise InvalidInputError(
            f"driver_count must be between {config.MIN_DRIVERS} and {config.MAX_DRIVERS}, got {count}"
        )

    hours = inputs.max_hours_per_day
    if isinstance(hours, bool) or not isinstance(hours, numbers.Real):
        raise InvalidInputError(f"max_hours_per_day must be a number, got {hours!r}")
    if not math.isfinite(hours):
        raise InvalidInputError(f"max_hours_per_day must be finite, got {hours}")
    if not 0 < hours <= config.MAX_HOURS_PER_DAY:
        raise InvalidInputError(
            f"max_hours_per_day must be greater than 0 and at most {config.MAX_HOURS_PER_DAY:g}, got {hours}"
        )

    if not isinstance(inputs.shift_start_time, time):
        raise InvalidInputError(
            f"shift_start_time must be a time of day, got {inputs.shift_start_time!r}"
        )


def estimate_capacity(
    inputs: SimulationInput,
    fleet: FleetSnapshot,
    engine_config: config.EngineConfig
) -> PerDriverCapacity:
    """
    Estimate deliveries per driver and for the whole fleet.

    Args:
        inputs: Operating parameters for the run
        fleet: Route and roster snapshot
        engine_config: Supplies the fallback route time for an empty fleet

    Returns:
        PerDriverCapacity with real-valued per-driver and aggregate figures

    Raises:
        InvalidInputError: If inputs are outside their bounds
    """
    validate_input(inputs)

    avg_route_time = fleet.average_route_time_minutes
    used_default = False
    if not avg_route_time:
        # Empty fleet, or every route has a zero base time
        avg_route_time = engine_config.default_average_route_time_minutes
        used_default = True
        logger.info(
            "No usable route times in fleet snapshot, assuming %.1f min per route",
            avg_route_time
        )

    if fleet.driver_count and inputs.driver_count > fleet.driver_count:
        logger.warning(
            "Simulating %d drivers but only %d are on the roster",
            inputs.driver_count, fleet.driver_count
        )

    per_driver = inputs.max_hours_per_day * 60 / avg_route_time
    aggregate = per_driver * inputs.driver_count

    logger.debug(
        "Capacity: %.2f deliveries/driver, %.2f fleet-wide (avg route %.1f min)",
        per_driver, aggregate, avg_route_time
    )
    return PerDriverCapacity(
        per_driver=per_driver,
        aggregate=aggregate,
        average_route_time_minutes=avg_route_time,
        used_default_route_time=used_default,
    )
