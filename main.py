#!/usr/bin/env python3
# main.py
"""
Command-Line Interface for the FleetOptimizer what-if simulator.

Runs a single simulation without the dashboard and prints the KPI and
revenue/cost/performance breakdown.

Usage:
    python main.py                               # 15 drivers, 09:00, 8h
    python main.py --drivers 25 --hours 7.5      # Different fleet plan
    python main.py --config data/economics.json  # Custom economics
    python main.py --data-dir data --order-history

Exit Codes:
    0: Success
    1: Data or configuration error
    2: Invalid simulation input
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from fleet_optimizer import config
from fleet_optimizer.errors import ConfigurationError, InvalidInputError
from fleet_optimizer.fleet import FleetData, build_snapshot, load_fleet, sample_fleet
from fleet_optimizer.models import SimulationInput, SimulationResult
from fleet_optimizer.simulation import run_simulation
from fleet_optimizer.utils import format_currency, parse_shift_start


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  FLEETOPTIMIZER - What-If Fleet Simulation")
    print("  Capacity, Reliability and Profit Projection")
    print("=" * 60 + "\n")


def print_result(result: SimulationResult) -> None:
    """
    Print the KPI tiles and the three-way breakdown.

    Every figure comes straight from the result record.
    """
    rows = [
        ("Projected Profit", format_currency(result.total_profit)),
        ("Efficiency Score", f"{result.efficiency_score:.1f}%"),
        ("On-Time Rate", f"{result.on_time_deliveries}/{result.total_deliveries}"),
        ("Active Drivers", str(result.driver_count)),
        ("Shift", f"{result.shift_start_time.strftime('%H:%M')} - "
                  f"{result.shift_end_time.strftime('%H:%M')}"),
    ]

    print("| Metric                    | Value                          |")
    print("|" + "-" * 27 + "|" + "-" * 32 + "|")
    for label, value in rows:
        print(f"| {label:<25} | {value:<30} |")

    print("\n  REVENUE BREAKDOWN")
    print(f"    Base Revenue:   {format_currency(result.revenue):>14}")
    print(f"    Bonuses:       +{format_currency(result.bonuses):>14}")
    print(f"    Total Profit:   {format_currency(result.total_profit):>14}")

    print("\n  COST BREAKDOWN")
    print(f"    Fuel Costs:     {format_currency(result.fuel_cost):>14}")
    print(f"    Penalties:     -{format_currency(result.penalties):>14}")
    print(f"    Total Costs:    {format_currency(result.total_costs):>14}")

    print("\n  PERFORMANCE METRICS")
    print(f"    On-Time Rate:     {result.on_time_rate * 100:.1f}%")
    print(f"    Avg per Driver:   {result.deliveries_per_driver:.1f} orders")
    print(f"    Profit per Order: {format_currency(result.profit_per_delivery)}")
    print(f"    Avg Route Time:   {result.average_elapsed_minutes:.1f} min (traffic-adjusted)")
    print(f"    Traffic Mix:      {result.traffic_mix()}")
    print("\n" + "=" * 60 + "\n")


def load_fleet_safe(data_dir: Optional[str]) -> Optional[FleetData]:
    """
    Load fleet data with graceful error handling.

    Args:
        data_dir: Directory holding drivers.csv/routes.csv/orders.csv, or
            None for the built-in sample fleet

    Returns:
        FleetData or None if loading failed
    """
    if data_dir is None:
        return sample_fleet()

    if not os.path.isdir(data_dir):
        print(f"ERROR: Data directory not found: {data_dir}")
        return None

    try:
        return load_fleet(data_dir)
    except (OSError, ValueError) as e:
        print(f"ERROR: Failed to load fleet data: {e}")
        return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="FleetOptimizer what-if simulation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                 # Default plan on sample fleet
  python main.py --drivers 30 --start 06:00      # Early, larger shift
  python main.py --data-dir data --all-routes    # Include closed routes
        """
    )

    parser.add_argument(
        "--drivers", "-n",
        type=int,
        default=config.DEFAULT_DRIVER_COUNT,
        help=f"Number of drivers ({config.MIN_DRIVERS}-{config.MAX_DRIVERS}, "
             f"default: {config.DEFAULT_DRIVER_COUNT})"
    )

    parser.add_argument(
        "--start", "-s",
        type=str,
        default=config.DEFAULT_SHIFT_START.strftime("%H:%M"),
        help="Shift start time HH:MM (default: 09:00)"
    )

    parser.add_argument(
        "--hours", "-H",
        type=float,
        default=config.DEFAULT_MAX_HOURS,
        help=f"Max hours per driver per day (0-{config.MAX_HOURS_PER_DAY:g}, "
             f"default: {config.DEFAULT_MAX_HOURS:g})"
    )

    parser.add_argument(
        "--data-dir", "-d",
        type=str,
        default=None,
        help="Directory with drivers.csv, routes.csv and orders.csv "
             "(default: built-in sample fleet)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="JSON file with operating economics (default: built-in values)"
    )

    parser.add_argument(
        "--all-routes",
        action="store_true",
        help="Include routes under maintenance or closed"
    )

    parser.add_argument(
        "--order-history",
        action="store_true",
        help="Use the mean historical order value as revenue per delivery"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show engine stage figures"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    print_header()

    try:
        engine_config = config.load_config(args.config) if args.config else config.default_config()
    except (OSError, ConfigurationError) as e:
        print(f"ERROR: {e}")
        return 1

    fleet_data = load_fleet_safe(args.data_dir)
    if fleet_data is None:
        return 1

    snapshot = build_snapshot(
        fleet_data,
        include_inactive_routes=args.all_routes,
        use_order_history=args.order_history,
    )
    print(f"Fleet: {len(snapshot.routes)} routes, {snapshot.driver_count} active drivers on roster")

    try:
        inputs = SimulationInput(
            driver_count=args.drivers,
            shift_start_time=parse_shift_start(args.start),
            max_hours_per_day=args.hours,
        )
        result = run_simulation(inputs, snapshot, engine_config)
    except InvalidInputError as e:
        print(f"ERROR: {e}")
        return 2

    print(f"Plan: {inputs.driver_count} drivers from {args.start}, up to {inputs.max_hours_per_day:g}h each\n")
    print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
