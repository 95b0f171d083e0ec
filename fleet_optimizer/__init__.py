# fleet_optimizer/__init__.py

from .models import (
    SimulationInput,
    SimulationResult,
    FleetSnapshot,
    RouteProfile,
    TrafficLevel,
    PerDriverCapacity,
    DeliveryOutcome,
    FinancialBreakdown,
)
from .config import EngineConfig, default_config, load_config
from .errors import FleetOptimizerError, InvalidInputError, ConfigurationError
from .capacity import estimate_capacity
from .outcome import estimate_outcome
from .financials import estimate_financials
from .simulation import run_simulation, SimulationSession
from .fleet import FleetData, build_snapshot, load_fleet, sample_fleet

__version__ = "1.0.0"
__author__ = "FleetOptimizer Team"

__all__ = [
    # Models
    "SimulationInput",
    "SimulationResult",
    "FleetSnapshot",
    "RouteProfile",
    "TrafficLevel",
    "PerDriverCapacity",
    "DeliveryOutcome",
    "FinancialBreakdown",
    # Errors
    "FleetOptimizerError",
    "InvalidInputError",
    "ConfigurationError",
    # Core
    "estimate_capacity",
    "estimate_outcome",
    "estimate_financials",
    "run_simulation",
    "SimulationSession",
    # Fleet data
    "FleetData",
    "build_snapshot",
    "load_fleet",
    "sample_fleet",
    # Config
    "EngineConfig",
    "default_config",
    "load_config",
]
