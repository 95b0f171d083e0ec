# fleet_optimizer/fleet.py
"""
Fleet data: the driver, route and order records behind the dashboard.

The engine never reads these collections itself. Callers load them (from CSV
or the built-in sample set) and call build_snapshot() to hand the engine a
read-only FleetSnapshot.
"""

from __future__ import annotations

import csv
import logging
import math
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .models import FleetSnapshot, RouteProfile, TrafficLevel

logger = logging.getLogger(__name__)

DRIVER_STATUSES = ("active", "inactive", "on-break")
ROUTE_STATUSES = ("active", "maintenance", "closed")
ORDER_STATUSES = ("pending", "in-transit", "delivered", "delayed")


@dataclass
class Driver:
    """
    A driver on the roster.

    Attributes:
        driver_id: Unique identifier
        name: Display name
        current_shift_hours: Hours worked so far today
        past_7_day_hours: Hours worked over the last week
        status: 'active', 'inactive' or 'on-break'
        efficiency: Performance rating, 0-100
    """
    driver_id: str
    name: str
    current_shift_hours: float = 0.0
    past_7_day_hours: float = 0.0
    status: str = "active"
    efficiency: float = 0.0

    def __repr__(self) -> str:
        return f"Driver({self.driver_id}, {self.status})"


@dataclass
class Route:
    """A delivery route and its aggregate characteristics."""
    id: str
    route_id: str
    distance_km: float
    traffic_level: TrafficLevel
    base_time_minutes: float
    average_deliveries: int = 0
    status: str = "active"

    def to_profile(self) -> RouteProfile:
        return RouteProfile(
            distance_km=self.distance_km,
            traffic_level=self.traffic_level,
            base_time_minutes=self.base_time_minutes,
        )

    def __repr__(self) -> str:
        return f"Route({self.route_id}, {self.traffic_level.value}, {self.status})"


@dataclass
class Order:
    """A customer order assigned to a route."""
    id: str
    order_id: str
    value: float
    assigned_route: str
    delivery_timestamp: Optional[datetime] = None
    status: str = "pending"
    customer_name: str = ""

    def __repr__(self) -> str:
        return f"Order({self.order_id}, {self.status})"


@dataclass
class FleetData:
    """The three in-memory collections the dashboard works with."""
    drivers: List[Driver] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    orders: List[Order] = field(default_factory=list)


def _check_status(value: str, allowed: tuple, kind: str) -> str:
    status = value.strip().lower()
    if status not in allowed:
        raise ValueError(f"unknown {kind} status '{value}'")
    return status


def _read_rows(path: str) -> List[dict]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Fleet data file not found: {path}")
    with open(path, 'r', newline='') as f:
        return list(csv.DictReader(f))


def load_drivers(path: str) -> List[Driver]:
    """
    Load drivers from a CSV file.

    Expected columns: driver_id, name, current_shift_hours, past_7_day_hours,
    status, efficiency

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a row is missing a column or holds a bad value
    """
    drivers: List[Driver] = []
    for row in _read_rows(path):
        try:
            drivers.append(Driver(
                driver_id=row['driver_id'],
                name=row['name'],
                current_shift_hours=float(row['current_shift_hours']),
                past_7_day_hours=float(row['past_7_day_hours']),
                status=_check_status(row['status'], DRIVER_STATUSES, "driver"),
                efficiency=float(row['efficiency']),
            ))
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid driver data in {path}: {e}")
    return drivers


def load_routes(path: str) -> List[Route]:
    """
    Load routes from a CSV file.

    Expected columns: id, route_id, distance_km, traffic_level,
    base_time_minutes, average_deliveries, status

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a row is missing a column or holds a bad value
    """
    routes: List[Route] = []
    for row in _read_rows(path):
        try:
            distance = float(row['distance_km'])
            base_time = float(row['base_time_minutes'])
            if not (math.isfinite(distance) and math.isfinite(base_time)):
                raise ValueError("distance and base time must be finite")
            if distance < 0 or base_time < 0:
                raise ValueError("distance and base time must not be negative")
            routes.append(Route(
                id=row['id'],
                route_id=row['route_id'],
                distance_km=distance,
                traffic_level=TrafficLevel.parse(row['traffic_level']),
                base_time_minutes=base_time,
                average_deliveries=int(row.get('average_deliveries') or 0),
                status=_check_status(row['status'], ROUTE_STATUSES, "route"),
            ))
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid route data in {path}: {e}")
    return routes


def load_orders(path: str) -> List[Order]:
    """
    Load orders from a CSV file.

    Expected columns: id, order_id, value, assigned_route, delivery_timestamp
    (ISO format, may be empty), status, customer_name

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a row is missing a column or holds a bad value
    """
    orders: List[Order] = []
    for row in _read_rows(path):
        try:
            timestamp_str = row['delivery_timestamp'].strip()
            orders.append(Order(
                id=row['id'],
                order_id=row['order_id'],
                value=float(row['value']),
                assigned_route=row['assigned_route'],
                delivery_timestamp=datetime.fromisoformat(timestamp_str) if timestamp_str else None,
                status=_check_status(row['status'], ORDER_STATUSES, "order"),
                customer_name=row.get('customer_name', ''),
            ))
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid order data in {path}: {e}")
    return orders


def load_fleet(data_dir: str) -> FleetData:
    """Load drivers.csv, routes.csv and orders.csv from a directory."""
    fleet = FleetData(
        drivers=load_drivers(os.path.join(data_dir, "drivers.csv")),
        routes=load_routes(os.path.join(data_dir, "routes.csv")),
        orders=load_orders(os.path.join(data_dir, "orders.csv")),
    )
    logger.info(
        "Loaded %d drivers, %d routes and %d orders from %s",
        len(fleet.drivers), len(fleet.routes), len(fleet.orders), data_dir
    )
    return fleet


def build_snapshot(
    fleet: FleetData,
    include_inactive_routes: bool = False,
    use_order_history: bool = False
) -> FleetSnapshot:
    """
    Assemble the read-only snapshot the engine consumes.

    Args:
        fleet: Current driver/route/order collections
        include_inactive_routes: Also count routes under maintenance or closed
        use_order_history: Derive revenue per delivery from the mean order
            value instead of the configured average route value

    Returns:
        FleetSnapshot built from copies of the route fields
    """
    routes = [
        r.to_profile() for r in fleet.routes
        if include_inactive_routes or r.status == "active"
    ]

    active_drivers = [d for d in fleet.drivers if d.status == "active"]
    avg_efficiency: Optional[float] = None
    if active_drivers:
        avg_efficiency = sum(d.efficiency for d in active_drivers) / len(active_drivers)

    avg_order_value: Optional[float] = None
    if use_order_history:
        if fleet.orders:
            avg_order_value = sum(o.value for o in fleet.orders) / len(fleet.orders)
        else:
            logger.info("No order history available, using configured route value")

    return FleetSnapshot(
        routes=tuple(routes),
        driver_count=len(active_drivers),
        average_driver_efficiency=avg_efficiency,
        average_order_value=avg_order_value,
    )


def sample_fleet() -> FleetData:
    """The built-in demo data set (also shipped as CSV under data/)."""
    drivers = [
        Driver("1", "Rajesh Kumar", 6.5, 45, "active", 92),
        Driver("2", "Priya Sharma", 4.2, 38, "active", 88),
        Driver("3", "Amit Singh", 8.0, 52, "on-break", 95),
        Driver("4", "Neha Patel", 2.1, 28, "active", 85),
        Driver("5", "Rohit Gupta", 0, 0, "inactive", 78),
    ]
    routes = [
        Route("1", "RT001", 15.5, TrafficLevel.MEDIUM, 45, 8, "active"),
        Route("2", "RT002", 22.3, TrafficLevel.HIGH, 65, 12, "active"),
        Route("3", "RT003", 8.7, TrafficLevel.LOW, 25, 5, "active"),
        Route("4", "RT004", 18.2, TrafficLevel.MEDIUM, 52, 9, "maintenance"),
        Route("5", "RT005", 31.8, TrafficLevel.HIGH, 85, 15, "closed"),
    ]
    orders = [
        Order("1", "ORD001", 1250, "RT001", datetime(2025, 1, 15, 14, 30), "delivered", "Aarav Sharma"),
        Order("2", "ORD002", 850, "RT002", datetime(2025, 1, 15, 16, 0), "in-transit", "Priya Singh"),
        Order("3", "ORD003", 2100, "RT003", datetime(2025, 1, 15, 11, 45), "delivered", "Rohit Kumar"),
        Order("4", "ORD004", 650, "RT001", datetime(2025, 1, 15, 18, 30), "delayed", "Neha Patel"),
        Order("5", "ORD005", 1800, "RT004", datetime(2025, 1, 16, 9, 0), "pending", "Amit Gupta"),
    ]
    return FleetData(drivers=drivers, routes=routes, orders=orders)
