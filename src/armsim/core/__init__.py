"""
Core module - Shared configuration, exceptions, logging and point helpers.
"""

from armsim.core.config import (
    ArmGeometry,
    ConfigManager,
    SimulationConfig,
    load_simulation_config,
)
from armsim.core.exceptions import (
    ArmSimError,
    ConfigurationError,
    DegenerateTargetError,
    InvalidOperationError,
    MotionError,
    UnreachableTargetError,
)

__all__ = [
    # Config
    "ArmGeometry",
    "ConfigManager",
    "SimulationConfig",
    "load_simulation_config",
    # Exceptions
    "ArmSimError",
    "ConfigurationError",
    "DegenerateTargetError",
    "InvalidOperationError",
    "MotionError",
    "UnreachableTargetError",
]
