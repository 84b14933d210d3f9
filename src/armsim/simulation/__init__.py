"""
Simulation module - Entities, gripper, telemetry and the per-tick controller.
"""

from armsim.simulation.controller import (
    ControllerStatus,
    ControlMode,
    MotionController,
    TickResult,
)
from armsim.simulation.entities import Entity, EntityPhysics, EntityStore
from armsim.simulation.gripper import GripperController
from armsim.simulation.telemetry import TelemetryEstimator, TelemetrySample

__all__ = [
    "MotionController",
    "ControlMode",
    "ControllerStatus",
    "TickResult",
    "Entity",
    "EntityStore",
    "EntityPhysics",
    "GripperController",
    "TelemetryEstimator",
    "TelemetrySample",
]
