"""
ArmSim - Motion-and-control engine for a simulated 3-DOF robotic arm.

Converts 3D targets into joint angles, smooths joint motion per tick, runs an
autonomous pick-and-place sequence, records and replays taught waypoints, and
estimates joint telemetry. Rendering and input devices are left to the caller.
"""

__version__ = "0.1.0"
__author__ = "ArmSim Contributors"

from armsim.core.config import ConfigManager, SimulationConfig
from armsim.simulation.controller import ControlMode, MotionController

__all__ = [
    "__version__",
    "ConfigManager",
    "SimulationConfig",
    "ControlMode",
    "MotionController",
]
