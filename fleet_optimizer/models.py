# fleet_optimizer/models.py
"""
Core domain models for the FleetOptimizer what-if simulator.

This module defines the value objects that flow through the engine pipeline:
- SimulationInput: the operating parameters for one run
- RouteProfile / FleetSnapshot: the read-only fleet view the engine consumes
- PerDriverCapacity, DeliveryOutcome, FinancialBreakdown: stage outputs
- SimulationResult: the record handed to the presentation layer

Everything here is frozen. A new run produces new objects; nothing is patched
in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from . import config


class TrafficLevel(Enum):
    """Traffic conditions on a route, in increasing order of lateness risk."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: str) -> "TrafficLevel":
        """Parse 'Low' / 'medium' / 'HIGH' into a TrafficLevel."""
        try:
            return cls(value.strip().capitalize())
        except ValueError:
            raise ValueError(f"Unknown traffic level: {value!r}")


@dataclass(frozen=True)
class SimulationInput:
    """
    Operating parameters for one simulation run.

    Attributes:
        driver_count: Number of drivers on shift (1..50)
        shift_start_time: Time the shift begins; only used to explain results
        max_hours_per_day: Hour cap per driver (0 < h <= 12)

    Bounds are checked by the capacity model, not here, so that a form can
    hold an out-of-range value and the engine still rejects it.
    """
    driver_count: int = config.DEFAULT_DRIVER_COUNT
    shift_start_time: time = config.DEFAULT_SHIFT_START
    max_hours_per_day: float = config.DEFAULT_MAX_HOURS


@dataclass(frozen=True)
class RouteProfile:
    """
    Aggregate characteristics of one route.

    Attributes:
        distance_km: Round-trip distance in kilometres
        traffic_level: Typical traffic on the route
        base_time_minutes: Time to run the route with no traffic delay
    """
    distance_km: float
    traffic_level: TrafficLevel
    base_time_minutes: float

    def __post_init__(self) -> None:
        for name in ("distance_km", "base_time_minutes"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"RouteProfile.{name} must be a finite value >= 0, got {value}")
        if not isinstance(self.traffic_level, TrafficLevel):
            object.__setattr__(self, "traffic_level", TrafficLevel.parse(str(self.traffic_level)))


@dataclass(frozen=True)
class FleetSnapshot:
    """
    Read-only view of the fleet supplied by the driver/route collaborators.

    Attributes:
        routes: Route profiles, in collaborator order
        driver_count: Number of drivers currently known to the roster
        average_driver_efficiency: Mean roster efficiency (0-100), if known
        average_order_value: Mean historical order value, if revenue should
            follow order history instead of the configured route value
    """
    routes: Tuple[RouteProfile, ...] = ()
    driver_count: int = 0
    average_driver_efficiency: Optional[float] = None
    average_order_value: Optional[float] = None

    def __post_init__(self) -> None:
        # Accept any iterable of routes but store a tuple.
        object.__setattr__(self, "routes", tuple(self.routes))

    @property
    def is_empty(self) -> bool:
        return not self.routes

    @property
    def average_route_time_minutes(self) -> Optional[float]:
        """Mean base time across routes, or None for an empty fleet."""
        if not self.routes:
            return None
        return sum(r.base_time_minutes for r in self.routes) / len(self.routes)

    @property
    def average_distance_km(self) -> Optional[float]:
        """Mean route distance, or None for an empty fleet."""
        if not self.routes:
            return None
        return sum(r.distance_km for r in self.routes) / len(self.routes)

    def traffic_share(self) -> Dict[TrafficLevel, float]:
        """Fraction of routes at each traffic level (all zero when empty)."""
        share = {level: 0.0 for level in TrafficLevel}
        for route in self.routes:
            share[route.traffic_level] += 1
        if self.routes:
            for level in share:
                share[level] /= len(self.routes)
        return share


@dataclass(frozen=True)
class PerDriverCapacity:
    """Output of the capacity model."""
    per_driver: float
    aggregate: float
    average_route_time_minutes: float
    used_default_route_time: bool = False


@dataclass(frozen=True)
class DeliveryOutcome:
    """
    Output of the outcome estimator.

    Attributes:
        total_deliveries: Expected completed deliveries
        on_time_deliveries: Deliveries expected within their window
        lateness_probability: Fleet-average probability a delivery is late
        average_elapsed_minutes: Traffic-adjusted average route time
        driver_hours: Driver-hours available to the fleet
        deliveries_by_traffic: Deliveries split by route traffic level
    """
    total_deliveries: int
    on_time_deliveries: int
    lateness_probability: float
    average_elapsed_minutes: float
    driver_hours: float
    deliveries_by_traffic: Dict[TrafficLevel, int] = field(default_factory=dict)

    @property
    def late_deliveries(self) -> int:
        return self.total_deliveries - self.on_time_deliveries

    @property
    def on_time_rate(self) -> float:
        if self.total_deliveries == 0:
            return 0.0
        return self.on_time_deliveries / self.total_deliveries


@dataclass(frozen=True)
class FinancialBreakdown:
    """Output of the financial model. Currency fields are whole units."""
    revenue: int
    fuel_cost: int
    penalties: int
    bonuses: int
    total_profit: int
    efficiency_score: float


@dataclass(frozen=True)
class SimulationResult:
    """
    Container for one simulation run's results.

    Presentation code must read every figure it shows from this record
    (including the derived properties below) so that displayed numbers
    always reconcile: total_profit == revenue + bonuses - fuel_cost - penalties.
    """
    total_profit: int
    efficiency_score: float
    on_time_deliveries: int
    total_deliveries: int
    fuel_cost: int
    penalties: int
    bonuses: int
    revenue: int

    # Explanatory fields
    driver_count: int
    max_hours_per_day: float
    shift_start_time: time
    shift_end_time: time
    average_elapsed_minutes: float = 0.0
    deliveries_by_traffic: Dict[TrafficLevel, int] = field(default_factory=dict)

    @property
    def late_deliveries(self) -> int:
        return self.total_deliveries - self.on_time_deliveries

    @property
    def on_time_rate(self) -> float:
        """On-time deliveries as a fraction of all deliveries (0.0 if none)."""
        if self.total_deliveries == 0:
            return 0.0
        return self.on_time_deliveries / self.total_deliveries

    @property
    def total_costs(self) -> int:
        return self.fuel_cost + self.penalties

    @property
    def deliveries_per_driver(self) -> float:
        return self.total_deliveries / self.driver_count

    @property
    def profit_per_delivery(self) -> float:
        if self.total_deliveries == 0:
            return 0.0
        return self.total_profit / self.total_deliveries

    def traffic_mix(self) -> str:
        """Deliveries per traffic level, e.g. 'Low 32 / Medium 96 / High 32'."""
        return " / ".join(
            f"{level.value} {self.deliveries_by_traffic.get(level, 0)}" for level in TrafficLevel
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display."""
        return {
            "Total Deliveries": self.total_deliveries,
            "On-Time Deliveries": f"{self.on_time_deliveries}/{self.total_deliveries}",
            "On-Time Rate": f"{self.on_time_rate * 100:.1f}%",
            "Efficiency Score": f"{self.efficiency_score:.1f}%",
            "Revenue": self.revenue,
            "Bonuses": self.bonuses,
            "Fuel Cost": self.fuel_cost,
            "Penalties": self.penalties,
            "Total Profit": self.total_profit,
            "Avg per Driver": f"{self.deliveries_per_driver:.1f} orders",
            "Profit per Order": f"{self.profit_per_delivery:.0f}",
            "Shift": f"{self.shift_start_time.strftime('%H:%M')}-{self.shift_end_time.strftime('%H:%M')}",
            "Avg Route Time": f"{self.average_elapsed_minutes:.1f} min",
            "Traffic Mix": self.traffic_mix(),
        }
