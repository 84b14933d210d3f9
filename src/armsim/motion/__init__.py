"""
Motion module - Arm kinematics and target generation.

This module provides:
- Closed-form IK for the base/shoulder/elbow arm, plus forward kinematics
- Exponential joint smoothing
- The autonomous pick-and-place sequencer
- Teach-and-replay waypoint programs
"""

from armsim.motion.kinematics import GeometrySolver, JointAngles, forward_kinematics
from armsim.motion.sequencer import AutoSequencer, SequencerPhase, TRANSITIONS
from armsim.motion.smoothing import MotionSmoother
from armsim.motion.teach import Program, Replayer, TeachRecorder, Waypoint

__all__ = [
    "GeometrySolver",
    "JointAngles",
    "forward_kinematics",
    "MotionSmoother",
    "AutoSequencer",
    "SequencerPhase",
    "TRANSITIONS",
    "TeachRecorder",
    "Replayer",
    "Waypoint",
    "Program",
]
