"""
Small 3D point helpers shared by the motion and simulation packages.

Points are float64 NumPy arrays of shape ``(3,)`` in arm-base coordinates:
``y`` is up, ``x``/``z`` span the floor.
"""

from typing import Sequence

import numpy as np

Point3 = np.ndarray


def as_point(value: Sequence[float] | np.ndarray) -> Point3:
    """Convert a 3-sequence into a fresh float64 point.

    Raises:
        ValueError: If *value* does not hold exactly three finite numbers.
    """
    point = np.array(value, dtype=np.float64).reshape(-1)
    if point.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {point.shape}")
    if not np.all(np.isfinite(point)):
        raise ValueError(f"Point has non-finite coordinates: {point.tolist()}")
    return point


def distance(a: Point3, b: Point3) -> float:
    """Euclidean distance between two points."""
    return float(np.linalg.norm(np.asarray(a) - np.asarray(b)))


def step_towards(current: Point3, goal: Point3, max_step: float) -> Point3:
    """
    Move *current* in a straight line towards *goal* by at most *max_step*.

    The step is clamped to the remaining distance, so the result never
    passes the goal. A zero-length direction or non-positive step returns
    an unchanged copy.

    Args:
        current: Start point
        goal: Point to move towards
        max_step: Distance to travel this call

    Returns:
        New point (the inputs are not modified)
    """
    current = np.asarray(current, dtype=np.float64)
    delta = np.asarray(goal, dtype=np.float64) - current
    remaining = float(np.linalg.norm(delta))
    if remaining == 0.0 or max_step <= 0.0:
        return current.copy()
    if max_step >= remaining:
        return np.asarray(goal, dtype=np.float64).copy()
    return current + delta / remaining * max_step


def to_tuple(point: Point3) -> tuple[float, float, float]:
    """Plain-float tuple view of a point, for results and logging."""
    return (float(point[0]), float(point[1]), float(point[2]))
