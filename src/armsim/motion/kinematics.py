"""
Closed-form inverse kinematics for the 3-DOF arm.

The arm is a vertical base column of height L1 with a revolute base joint
(rotation about the vertical axis), a shoulder pivot on top of the column,
an upper arm L2 and a forearm L3. Shoulder and elbow both rotate in the
arm's vertical plane, so once the base angle aligns that plane with the
target the remaining problem is a planar two-link triangle solved with the
law of cosines.

Angle conventions:
    base: ``atan2(x, z)``, zero when the arm points along +z.
    shoulder: measured from the vertical rest pose, positive leaning outwards.
    elbow: bend relative to the upper arm, zero when the forearm is straight.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from armsim.core.config import ArmGeometry
from armsim.core.exceptions import DegenerateTargetError, UnreachableTargetError
from armsim.core.geometry import Point3, as_point, to_tuple

# Closer than this to the shoulder pivot the solution is undefined
DEGENERATE_EPS = 1e-9


@dataclass(frozen=True)
class JointAngles:
    """Base, shoulder and elbow angles in radians."""

    base: float = 0.0
    shoulder: float = 0.0
    elbow: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.base, self.shoulder, self.elbow], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Sequence[float] | np.ndarray) -> "JointAngles":
        base, shoulder, elbow = (float(v) for v in values)
        return cls(base=base, shoulder=shoulder, elbow=elbow)

    def as_degrees(self) -> tuple[float, float, float]:
        return tuple(math.degrees(v) for v in (self.base, self.shoulder, self.elbow))


def _clamped_acos(value: float) -> float:
    # Round-off at the workspace boundary can push the ratio just past +-1
    return math.acos(max(-1.0, min(1.0, value)))


class GeometrySolver:
    """
    Analytic IK solver mapping a target point to joint angles.

    Pure and deterministic: the result depends only on the link lengths and
    the target. Targets outside the reachable shell raise
    :class:`UnreachableTargetError`; callers are expected to keep their last
    valid command.
    """

    def __init__(self, geometry: Optional[ArmGeometry] = None):
        """
        Initialize the solver.

        Args:
            geometry: Link lengths (defaults to L1=1, L2=3, L3=2.5)
        """
        self.geometry = geometry or ArmGeometry()

    def solve(self, target: Sequence[float] | Point3) -> JointAngles:
        """
        Solve IK for a target end-effector point.

        Args:
            target: Point (x, y, z) in arm-base coordinates

        Returns:
            JointAngles placing the end effector at the target

        Raises:
            DegenerateTargetError: If the target coincides with the shoulder pivot
            UnreachableTargetError: If the target is beyond full extension, or
                closer to the shoulder than the folded arm can reach
        """
        point = as_point(target)
        x, y, z = point
        l1, l2, l3 = (
            self.geometry.base_height,
            self.geometry.upper_arm,
            self.geometry.forearm,
        )

        base = math.atan2(x, z)

        r = math.hypot(x, z)
        dy = y - l1
        h = math.hypot(r, dy)

        if h < DEGENERATE_EPS:
            raise DegenerateTargetError(
                "Target coincides with the shoulder pivot",
                target=to_tuple(point),
                details={"distance": h},
            )
        if h > self.geometry.max_reach:
            raise UnreachableTargetError(
                "Target exceeds maximum extension",
                target=to_tuple(point),
                details={"distance": h, "max_reach": self.geometry.max_reach},
            )
        if h < self.geometry.min_reach:
            raise UnreachableTargetError(
                "Target is inside the folded-arm dead zone",
                target=to_tuple(point),
                details={"distance": h, "min_reach": self.geometry.min_reach},
            )

        phi1 = _clamped_acos((l2 * l2 + h * h - l3 * l3) / (2 * l2 * h))
        phi2 = math.atan2(dy, r)
        shoulder = math.pi / 2 - (phi1 + phi2)

        phi3 = _clamped_acos((l2 * l2 + l3 * l3 - h * h) / (2 * l2 * l3))
        elbow = math.pi - phi3

        return JointAngles(base=base, shoulder=shoulder, elbow=elbow)

    def try_solve(self, target: Sequence[float] | Point3) -> Optional[JointAngles]:
        """Solve IK, returning None instead of raising for unreachable targets."""
        try:
            return self.solve(target)
        except UnreachableTargetError:
            return None

    def is_reachable(self, target: Sequence[float] | Point3) -> bool:
        return self.try_solve(target) is not None


def forward_kinematics(
    angles: JointAngles, geometry: Optional[ArmGeometry] = None
) -> Point3:
    """
    Compute the end-effector point for a set of joint angles.

    Args:
        angles: Joint angles in radians
        geometry: Link lengths (defaults to ArmGeometry())

    Returns:
        Point (x, y, z) in arm-base coordinates
    """
    geometry = geometry or ArmGeometry()
    upper = angles.shoulder
    fore = angles.shoulder + angles.elbow

    reach = geometry.upper_arm * math.sin(upper) + geometry.forearm * math.sin(fore)
    height = (
        geometry.base_height
        + geometry.upper_arm * math.cos(upper)
        + geometry.forearm * math.cos(fore)
    )
    return np.array(
        [reach * math.sin(angles.base), height, reach * math.cos(angles.base)],
        dtype=np.float64,
    )
