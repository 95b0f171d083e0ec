# fleet_optimizer/config.py
"""
Configuration parameters for the FleetOptimizer what-if simulator.

This module centralizes all tunable parameters, making it easy to:
- Adjust the operating economics (fuel, penalties, bonuses, revenue)
- Tune the traffic model behind on-time performance
- Re-weight the efficiency score

The module-level constants are the shipped defaults. The engine itself never
reads them directly: every run receives an EngineConfig, so economics can be
tuned per run (from the dashboard sidebar or a JSON file) without code changes.
"""

from __future__ import annotations

import json
import math
import numbers
import os
from dataclasses import dataclass, fields, asdict
from datetime import time
from typing import Any, Dict, Final, Mapping

from .errors import ConfigurationError

# =============================================================================
# SIMULATION INPUT BOUNDS AND DEFAULTS
# =============================================================================

MIN_DRIVERS: Final[int] = 1
"""Smallest fleet the simulator accepts."""

MAX_DRIVERS: Final[int] = 50
"""Largest fleet the simulator accepts."""

MAX_HOURS_PER_DAY: Final[float] = 12.0
"""Upper bound (inclusive) on a driver's working hours per day."""

DEFAULT_DRIVER_COUNT: Final[int] = 15
DEFAULT_SHIFT_START: Final[time] = time(9, 0)
DEFAULT_MAX_HOURS: Final[float] = 8.0

# =============================================================================
# FINANCIAL PARAMETERS (required)
# =============================================================================
# Currency units are whole rupees throughout.

BASE_FUEL_COST: float = 8000.0
"""Fixed fuel spend for a day of operations, independent of fleet size."""

PER_DRIVER_FUEL_RATE: float = 400.0
"""Fuel spend per driver on a route of REFERENCE_ROUTE_DISTANCE_KM."""

PER_LATE_PENALTY: float = 250.0
"""Penalty charged for each late delivery."""

PER_ON_TIME_BONUS: float = 50.0
"""Bonus earned per on-time delivery once the bonus threshold is reached."""

ON_TIME_BONUS_THRESHOLD: float = 0.90
"""
On-time rate (0.0 - 1.0) at which the bonus switches on.
This is a step, not a slope: 89.9% earns nothing, 90% earns the full bonus.
"""

AVERAGE_ROUTE_VALUE: float = 1000.0
"""Revenue per completed delivery when no order history is supplied."""

DEFAULT_AVERAGE_ROUTE_TIME_MINUTES: float = 45.0
"""Average route time assumed when the fleet has no routes to average."""

# =============================================================================
# TRAFFIC MODEL
# =============================================================================
# Lateness must strictly increase Low < Medium < High.

LATENESS_PROBABILITY_LOW: float = 0.05
LATENESS_PROBABILITY_MEDIUM: float = 0.12
LATENESS_PROBABILITY_HIGH: float = 0.25

TRAFFIC_TIME_MULTIPLIER_LOW: float = 1.0
"""Elapsed time on a Low traffic route relative to its base time."""

TRAFFIC_TIME_MULTIPLIER_MEDIUM: float = 1.15
TRAFFIC_TIME_MULTIPLIER_HIGH: float = 1.35

REFERENCE_ROUTE_DISTANCE_KM: float = 15.0
"""Route distance at which PER_DRIVER_FUEL_RATE applies unscaled."""

# =============================================================================
# EFFICIENCY SCORE WEIGHTS
# =============================================================================

RELIABILITY_WEIGHT: float = 0.7
"""Share of the efficiency score driven by the on-time rate."""

PRODUCTIVITY_WEIGHT: float = 0.3
"""Share of the efficiency score driven by deliveries per driver-hour."""

TARGET_DELIVERIES_PER_DRIVER_HOUR: float = 1.5
"""Deliveries per driver-hour that earns the full productivity share."""


# Options that must be present when building a config from a mapping.
REQUIRED_OPTIONS: Final = (
    "base_fuel_cost",
    "per_driver_fuel_rate",
    "per_late_penalty",
    "per_on_time_bonus",
    "on_time_bonus_threshold",
    "average_route_value",
    "default_average_route_time_minutes",
)

# camelCase spellings accepted from JSON / dashboard payloads.
OPTION_ALIASES: Final[Dict[str, str]] = {
    "baseFuelCost": "base_fuel_cost",
    "perDriverFuelRate": "per_driver_fuel_rate",
    "perLatePenalty": "per_late_penalty",
    "perOnTimeBonus": "per_on_time_bonus",
    "onTimeBonusThreshold": "on_time_bonus_threshold",
    "averageRouteValue": "average_route_value",
    "defaultAverageRouteTimeMinutes": "default_average_route_time_minutes",
}


def _check_number(name: str, value: Any) -> float:
    """Return value as a float, or raise ConfigurationError."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ConfigurationError(f"'{name}' must be finite, got {value}")
    if value < 0:
        raise ConfigurationError(f"'{name}' must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class EngineConfig:
    """
    Operating economics and model weights for one simulation run.

    The first seven fields are the recognised financial options and have no
    defaults when loaded through from_mapping(); the rest fall back to the
    module constants above.
    """
    base_fuel_cost: float
    per_driver_fuel_rate: float
    per_late_penalty: float
    per_on_time_bonus: float
    on_time_bonus_threshold: float
    average_route_value: float
    default_average_route_time_minutes: float

    lateness_probability_low: float = LATENESS_PROBABILITY_LOW
    lateness_probability_medium: float = LATENESS_PROBABILITY_MEDIUM
    lateness_probability_high: float = LATENESS_PROBABILITY_HIGH
    traffic_time_multiplier_low: float = TRAFFIC_TIME_MULTIPLIER_LOW
    traffic_time_multiplier_medium: float = TRAFFIC_TIME_MULTIPLIER_MEDIUM
    traffic_time_multiplier_high: float = TRAFFIC_TIME_MULTIPLIER_HIGH
    reference_route_distance_km: float = REFERENCE_ROUTE_DISTANCE_KM
    reliability_weight: float = RELIABILITY_WEIGHT
    productivity_weight: float = PRODUCTIVITY_WEIGHT
    target_deliveries_per_driver_hour: float = TARGET_DELIVERIES_PER_DRIVER_HOUR

    def __post_init__(self) -> None:
        for f in fields(self):
            # frozen: normalise through object.__setattr__
            object.__setattr__(self, f.name, _check_number(f.name, getattr(self, f.name)))

        if self.on_time_bonus_threshold > 1.0:
            raise ConfigurationError(
                f"'on_time_bonus_threshold' must be between 0 and 1, got {self.on_time_bonus_threshold}"
            )
        if self.default_average_route_time_minutes <= 0:
            raise ConfigurationError("'default_average_route_time_minutes' must be positive")
        if self.reference_route_distance_km <= 0:
            raise ConfigurationError("'reference_route_distance_km' must be positive")
        if self.target_deliveries_per_driver_hour <= 0:
            raise ConfigurationError("'target_deliveries_per_driver_hour' must be positive")
        if self.reliability_weight + self.productivity_weight <= 0:
            raise ConfigurationError("efficiency weights must not both be zero")

        low = self.lateness_probability_low
        medium = self.lateness_probability_medium
        high = self.lateness_probability_high
        if high > 1.0:
            raise ConfigurationError("lateness probabilities must lie between 0 and 1")
        if not low < medium < high:
            raise ConfigurationError(
                f"lateness probabilities must increase Low < Medium < High, got {low}, {medium}, {high}"
            )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "EngineConfig":
        """
        Build a config from a plain mapping (JSON payload, form state).

        Accepts snake_case or camelCase keys for the financial options.

        Raises:
            ConfigurationError: If a required option is missing, a key is not
                recognised, or a value is not a usable number.
        """
        known = {f.name for f in fields(cls)}
        normalized: Dict[str, Any] = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unrecognised configuration option '{key}'")
            normalized[name] = value

        missing = [name for name in REQUIRED_OPTIONS if name not in normalized]
        if missing:
            raise ConfigurationError(f"Missing required configuration options: {', '.join(missing)}")

        return cls(**normalized)

    def replace(self, **changes: Any) -> "EngineConfig":
        """Return a copy with some options changed (validated again)."""
        values = asdict(self)
        values.update(changes)
        return EngineConfig(**values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def default_config() -> EngineConfig:
    """Build an EngineConfig from the module-level defaults."""
    return EngineConfig(
        base_fuel_cost=BASE_FUEL_COST,
        per_driver_fuel_rate=PER_DRIVER_FUEL_RATE,
        per_late_penalty=PER_LATE_PENALTY,
        per_on_time_bonus=PER_ON_TIME_BONUS,
        on_time_bonus_threshold=ON_TIME_BONUS_THRESHOLD,
        average_route_value=AVERAGE_ROUTE_VALUE,
        default_average_route_time_minutes=DEFAULT_AVERAGE_ROUTE_TIME_MINUTES,
    )


def load_config(path: str) -> EngineConfig:
    """
    Load an EngineConfig from a JSON file.

    Args:
        path: Path to a JSON object holding configuration options

    Returns:
        Validated EngineConfig

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the JSON is malformed or an option is invalid
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        try:
            options = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}")

    if not isinstance(options, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return EngineConfig.from_mapping(options)
