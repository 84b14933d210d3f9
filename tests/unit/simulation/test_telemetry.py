"""
Tests for the telemetry estimator.
"""

import math

import pytest

from armsim.core.config import TelemetryConfig
from armsim.motion.kinematics import JointAngles
from armsim.simulation.telemetry import TelemetryEstimator


def shoulder(value):
    return JointAngles(base=0.0, shoulder=value, elbow=0.0)


class TestTelemetryEstimator:
    """Tests for TelemetryEstimator.observe."""

    def test_samples_every_fifth_tick(self):
        estimator = TelemetryEstimator(TelemetryConfig())
        produced = [
            tick
            for tick in range(1, 12)
            if estimator.observe(tick, shoulder(0.1 * tick), 0.1) is not None
        ]
        assert produced == [5, 10]
        assert [s.tick for s in estimator.history] == [5, 10]

    def test_velocity_spans_one_tick(self):
        """Test velocity uses the previous tick even on decimated ticks."""
        estimator = TelemetryEstimator(TelemetryConfig(decimation=5))
        for tick in range(1, 5):
            estimator.observe(tick, shoulder(0.1 * tick), 0.1)
        sample = estimator.observe(5, shoulder(0.45), 0.1)
        assert sample.velocity == pytest.approx(0.5)

    def test_velocity_is_absolute(self):
        estimator = TelemetryEstimator(TelemetryConfig(decimation=1))
        estimator.observe(1, shoulder(1.0), 0.5)
        assert estimator.observe(2, shoulder(0.5), 0.5).velocity == pytest.approx(1.0)

    def test_zero_elapsed(self):
        estimator = TelemetryEstimator(TelemetryConfig(decimation=1))
        assert estimator.observe(1, shoulder(1.0), 0.0).velocity == 0.0

    @pytest.mark.parametrize(
        "angle, carrying, expected",
        [
            (0.0, True, 2.5),
            (0.0, False, 1.0),
            (math.pi / 3, False, 0.5),
            (math.pi, False, 1.0),
            (math.pi, True, 0.5),
        ],
    )
    def test_load(self, angle, carrying, expected):
        estimator = TelemetryEstimator(TelemetryConfig(decimation=1))
        sample = estimator.observe(1, shoulder(angle), 0.1, carrying=carrying)
        assert sample.load == pytest.approx(expected)

    def test_capacity_drops_oldest(self):
        estimator = TelemetryEstimator(TelemetryConfig(decimation=1, capacity=3))
        for tick in range(1, 11):
            estimator.observe(tick, shoulder(0.0), 0.1)
        assert [s.tick for s in estimator.history] == [8, 9, 10]
        assert estimator.latest.tick == 10

    def test_reset(self):
        estimator = TelemetryEstimator(TelemetryConfig(decimation=1))
        estimator.observe(1, shoulder(1.0), 0.1)
        estimator.reset(shoulder(1.0))
        assert estimator.history == ()
        assert estimator.latest is None
        assert estimator.observe(2, shoulder(1.0), 0.1).velocity == 0.0
