"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from armsim.core.config import EntityConfig, SimulationConfig
from armsim.simulation.controller import MotionController


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a sample configuration directory with one arm profile."""
    config_dir = temp_dir / "config"
    (config_dir / "arms").mkdir(parents=True)

    arm_config = """
arm:
  base_height: 1.0
  upper_arm: 3.0
  forearm: 2.5

sequencer:
  speed: 5.0
  drop_zone: [-3.0, 1.0]

telemetry:
  decimation: 2
  capacity: 20

entities:
  - id: cube
    position: [2.0, 0.5, 2.0]
  - id: cylinder
    position: [-1.0, 0.5, 3.0]

initial_target: [1.0, 2.0, 2.0]
"""
    (config_dir / "arms" / "test_arm.yaml").write_text(arm_config)
    return config_dir


@pytest.fixture
def sim_config():
    """Default configuration with the block moved inside the workspace."""
    return SimulationConfig(
        name="reachable",
        entities=[EntityConfig(id="block", position=(2.5, 0.5, 2.0))],
    )


@pytest.fixture
def controller(sim_config):
    """A fresh controller on the reachable configuration."""
    return MotionController(sim_config)
