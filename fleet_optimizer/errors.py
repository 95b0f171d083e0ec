# fleet_optimizer/errors.py
"""Exception types raised by the simulation engine."""


class FleetOptimizerError(ValueError):
    """Base class for all engine errors."""


class InvalidInputError(FleetOptimizerError):
    """A simulation input is outside its declared bounds or not a finite number."""


class ConfigurationError(FleetOptimizerError):
    """A tunable is missing, unrecognised, non-numeric or out of range."""
