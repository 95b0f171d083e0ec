# benchmark.py
"""
Fleet plan sweep for the FleetOptimizer what-if simulator.
Runs the engine over a grid of driver counts and hour caps and writes CSV
files for analysis, with each plan compared to the default plan.
"""

import argparse
import csv
import json
import os
from datetime import datetime
from typing import Dict, List, Optional

from fleet_optimizer import config
from fleet_optimizer.fleet import build_snapshot, load_fleet, sample_fleet
from fleet_optimizer.models import FleetSnapshot, SimulationInput, TrafficLevel
from fleet_optimizer.simulation import run_simulation

# Named plans reported individually
SCENARIOS = [
    {"name": "Skeleton_Crew", "drivers": 5, "hours": 6.0},
    {"name": "Default_Plan", "drivers": config.DEFAULT_DRIVER_COUNT, "hours": config.DEFAULT_MAX_HOURS},
    {"name": "Half_Day", "drivers": 15, "hours": 4.0},
    {"name": "Long_Shift", "drivers": 15, "hours": 12.0},
    {"name": "Peak_Season", "drivers": 40, "hours": 10.0},
    {"name": "Full_Fleet", "drivers": config.MAX_DRIVERS, "hours": config.MAX_HOURS_PER_DAY},
]

BASELINE_SCENARIO = "Default_Plan"

DRIVER_GRID = [1, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50]
HOURS_GRID = [4.0, 6.0, 7.5, 8.0, 10.0, 12.0]

# All KPIs for CSV output
CSV_KPIS = [
    "total_deliveries",
    "on_time_deliveries",
    "late_deliveries",
    "on_time_rate_pct",
    "deliveries_per_driver",
    "revenue",
    "bonuses",
    "fuel_cost",
    "penalties",
    "total_profit",
    "profit_per_delivery",
    "efficiency_score",
    "avg_route_time_min",
    "low_traffic_deliveries",
    "medium_traffic_deliveries",
    "high_traffic_deliveries",
]

# Metrics where LOWER is better (for highlighting improvements)
LOWER_IS_BETTER = [
    "late_deliveries",
    "fuel_cost",
    "penalties",
    "avg_route_time_min",
    "high_traffic_deliveries",
]


def result_to_kpis(result) -> Dict[str, float]:
    """Flatten a SimulationResult into the CSV KPI columns."""
    return {
        "total_deliveries": result.total_deliveries,
        "on_time_deliveries": result.on_time_deliveries,
        "late_deliveries": result.late_deliveries,
        "on_time_rate_pct": round(result.on_time_rate * 100, 2),
        "deliveries_per_driver": round(result.deliveries_per_driver, 2),
        "revenue": result.revenue,
        "bonuses": result.bonuses,
        "fuel_cost": result.fuel_cost,
        "penalties": result.penalties,
        "total_profit": result.total_profit,
        "profit_per_delivery": round(result.profit_per_delivery, 2),
        "efficiency_score": round(result.efficiency_score, 2),
        "avg_route_time_min": round(result.average_elapsed_minutes, 2),
        "low_traffic_deliveries": result.deliveries_by_traffic.get(TrafficLevel.LOW, 0),
        "medium_traffic_deliveries": result.deliveries_by_traffic.get(TrafficLevel.MEDIUM, 0),
        "high_traffic_deliveries": result.deliveries_by_traffic.get(TrafficLevel.HIGH, 0),
    }


def run_plan(drivers: int, hours: float, snapshot: FleetSnapshot, engine_config) -> Dict[str, float]:
    inputs = SimulationInput(
        driver_count=drivers,
        shift_start_time=config.DEFAULT_SHIFT_START,
        max_hours_per_day=hours,
    )
    return result_to_kpis(run_simulation(inputs, snapshot, engine_config))


def run_scenarios(snapshot: FleetSnapshot, engine_config) -> Dict[str, Dict]:
    """Run every named scenario and return KPI results keyed by name."""
    results: Dict[str, Dict] = {}
    for scenario in SCENARIOS:
        kpis = run_plan(scenario["drivers"], scenario["hours"], snapshot, engine_config)
        results[scenario["name"]] = {"drivers": scenario["drivers"], "hours": scenario["hours"], "kpis": kpis}
        print(f"  ✓ {scenario['name']}: {kpis['total_deliveries']} deliveries, "
              f"profit {kpis['total_profit']}, efficiency {kpis['efficiency_score']:.1f}")
    return results


def calculate_comparison_stats(results: Dict[str, Dict], baseline_key: str = BASELINE_SCENARIO) -> Dict[str, Dict]:
    """Calculate difference vs the baseline plan for each scenario."""
    if baseline_key not in results:
        return results

    baseline = results[baseline_key]["kpis"]

    for name, data in results.items():
        comparison = {}
        comparison_pct = {}
        is_improvement = {}

        for kpi in CSV_KPIS:
            baseline_val = baseline.get(kpi, 0)
            scenario_val = data["kpis"].get(kpi, 0)

            diff = scenario_val - baseline_val
            comparison[kpi] = round(diff, 4)

            if baseline_val != 0:
                comparison_pct[kpi] = round((diff / abs(baseline_val)) * 100, 2)
            else:
                comparison_pct[kpi] = 0

            if name == baseline_key:
                is_improvement[kpi] = False
            elif kpi in LOWER_IS_BETTER:
                is_improvement[kpi] = diff < 0
            else:
                is_improvement[kpi] = diff > 0

        data["vs_baseline"] = comparison
        data["vs_baseline_pct"] = comparison_pct
        data["is_improvement"] = is_improvement

    return results


def save_scenarios_csv(results: Dict[str, Dict], output_dir: str, timestamp: str) -> str:
    """Save one row per KPI with a value/delta column group per scenario."""
    filename = f"{output_dir}/SCENARIOS_{timestamp}.csv"
    names = list(results.keys())

    with open(filename, 'w', newline='') as f:
        writer = csv.writer(f)

        header = ["KPI", "Lower_Is_Better"]
        for name in names:
            header.append(name)
            if name != BASELINE_SCENARIO:
                header.append(f"{name}_vs_baseline")
                header.append(f"{name}_vs_baseline_pct")
                header.append(f"{name}_is_improvement")
        writer.writerow(header)

        writer.writerow(["_drivers", ""] + _metadata_cells(results, "drivers"))
        writer.writerow(["_hours", ""] + _metadata_cells(results, "hours"))
        writer.writerow([])

        for kpi in CSV_KPIS:
            row = [kpi, "yes" if kpi in LOWER_IS_BETTER else "no"]
            for name in names:
                data = results[name]
                row.append(data["kpis"].get(kpi, ""))
                if name != BASELINE_SCENARIO:
                    row.append(data.get("vs_baseline", {}).get(kpi, ""))
                    row.append(data.get("vs_baseline_pct", {}).get(kpi, ""))
                    row.append("yes" if data.get("is_improvement", {}).get(kpi, False) else "no")
            writer.writerow(row)

    print(f"  ✓ Saved: {filename}")
    return filename


def _metadata_cells(results: Dict[str, Dict], key: str) -> List:
    cells = []
    for name, data in results.items():
        cells.append(data[key])
        if name != BASELINE_SCENARIO:
            cells.extend(["", "", ""])
    return cells


def save_grid_csv(snapshot: FleetSnapshot, engine_config, output_dir: str, timestamp: str) -> List[Dict]:
    """Sweep the driver x hours grid and save it as a flat CSV."""
    filename = f"{output_dir}/GRID_{timestamp}.csv"
    rows: List[Dict] = []

    with open(filename, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(["drivers", "hours"] + CSV_KPIS)

        for hours in HOURS_GRID:
            for drivers in DRIVER_GRID:
                kpis = run_plan(drivers, hours, snapshot, engine_config)
                rows.append({"drivers": drivers, "hours": hours, **kpis})
                writer.writerow([drivers, hours] + [kpis[k] for k in CSV_KPIS])

    print(f"✓ Saved grid data: {filename}")
    return rows


def best_plans(grid_rows: List[Dict]) -> Dict[str, Dict]:
    """Best plan per hour cap by total profit, ties broken by fewer drivers."""
    best: Dict[str, Dict] = {}
    for row in grid_rows:
        key = f"{row['hours']:g}h"
        current = best.get(key)
        if (current is None
                or row["total_profit"] > current["total_profit"]
                or (row["total_profit"] == current["total_profit"] and row["drivers"] < current["drivers"])):
            best[key] = row
    return best


def main(argv: Optional[List[str]] = None):
    """Run the full fleet plan sweep."""
    parser = argparse.ArgumentParser(description="FleetOptimizer plan sweep")
    parser.add_argument("--data-dir", "-d", default=None,
                        help="Directory with drivers.csv, routes.csv and orders.csv")
    parser.add_argument("--config", "-c", default=None, help="JSON economics file")
    parser.add_argument("--output-dir", "-o", default="results", help="Output directory")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("FLEETOPTIMIZER PLAN SWEEP")
    print("=" * 60)

    fleet_data = load_fleet(args.data_dir) if args.data_dir else sample_fleet()
    snapshot = build_snapshot(fleet_data)
    engine_config = config.load_config(args.config) if args.config else config.default_config()

    os.makedirs(args.output_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    results = calculate_comparison_stats(run_scenarios(snapshot, engine_config))
    save_scenarios_csv(results, args.output_dir, timestamp)

    grid_rows = save_grid_csv(snapshot, engine_config, args.output_dir, timestamp)
    best = best_plans(grid_rows)

    json_file = f"{args.output_dir}/sweep_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(
            {"config": engine_config.to_dict(), "scenarios": results, "best_plans": best},
            f, indent=2, default=str
        )
    print(f"✓ Saved JSON: {json_file}")

    print(f"\n{'='*60}")
    print("BEST PLAN PER HOUR CAP (by profit)")
    print(f"{'='*60}")
    for key, row in best.items():
        print(f"  {key:>5}: {row['drivers']:>2} drivers -> profit {row['total_profit']}, "
              f"on-time {row['on_time_rate_pct']}%")


if __name__ == "__main__":
    main()
