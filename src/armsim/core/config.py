"""
Configuration management for ArmSim.

Every tunable constant of the motion engine (link lengths, smoothing factor,
sequencer waypoints, gripper capture radius, telemetry decimation, ...) lives
in a pydantic model with the shipped default, so ``SimulationConfig()`` is a
complete working setup. Arm profiles override those defaults from YAML files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from armsim.core.exceptions import ConfigurationError

Vector3Tuple = tuple[float, float, float]


class ArmGeometry(BaseModel):
    """Link lengths of the 3-DOF arm."""

    base_height: float = Field(default=1.0, gt=0)  # L1: ground to shoulder pivot
    upper_arm: float = Field(default=3.0, gt=0)  # L2
    forearm: float = Field(default=2.5, gt=0)  # L3

    @property
    def max_reach(self) -> float:
        return self.upper_arm + self.forearm

    @property
    def min_reach(self) -> float:
        return abs(self.upper_arm - self.forearm)


class MotionConfig(BaseModel):
    """Joint smoothing configuration."""

    smoothing: float = Field(default=0.1, gt=0, le=1)


class SequencerConfig(BaseModel):
    """Pick-and-place sequence geometry and speed."""

    speed: float = Field(default=6.0, gt=0)
    threshold: float = Field(default=0.1, gt=0)
    hover_offset: float = Field(default=2.0, ge=0)
    lift_height: float = 3.0
    drop_zone: tuple[float, float] = (-4.0, 0.0)  # (x, z)
    drop_height: float = 0.8
    home_position: Vector3Tuple = (0.0, 3.0, 0.0)


class ReplayConfig(BaseModel):
    """Teach-and-replay configuration."""

    speed: float = Field(default=4.0, gt=0)
    threshold: float = Field(default=0.1, gt=0)


class GripperConfig(BaseModel):
    """Gripper capture configuration."""

    capture_radius: float = Field(default=1.5, gt=0)
    attach_offset: float = 0.75  # attached entity hangs this far below the end effector


class PhysicsConfig(BaseModel):
    """Free-fall simulation for entities that are not held."""

    floor_level: float = 0.5
    gravity_step: float = Field(default=0.02, ge=0)  # velocity decrement per tick


class TelemetryConfig(BaseModel):
    """Telemetry sampling configuration."""

    decimation: int = Field(default=5, ge=1)
    capacity: int = Field(default=50, ge=1)
    payload_load: float = 1.5


class EntityConfig(BaseModel):
    """Initial placement of a liftable entity."""

    id: str
    position: Vector3Tuple


def _default_entities() -> list[EntityConfig]:
    return [EntityConfig(id="block", position=(4.0, 0.5, 4.0))]


class SimulationConfig(BaseModel):
    """Complete configuration of one simulated arm cell."""

    name: str = "default"
    arm: ArmGeometry = Field(default_factory=ArmGeometry)
    motion: MotionConfig = Field(default_factory=MotionConfig)
    sequencer: SequencerConfig = Field(default_factory=SequencerConfig)
    replay: ReplayConfig = Field(default_factory=ReplayConfig)
    gripper: GripperConfig = Field(default_factory=GripperConfig)
    physics: PhysicsConfig = Field(default_factory=PhysicsConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    entities: list[EntityConfig] = Field(default_factory=_default_entities)
    initial_target: Vector3Tuple = (2.0, 2.0, 2.0)

    @field_validator("entities")
    @classmethod
    def _unique_entity_ids(cls, entities: list[EntityConfig]) -> list[EntityConfig]:
        ids = [entity.id for entity in entities]
        if len(ids) != len(set(ids)):
            raise ValueError(f"entity ids must be unique, got {ids}")
        return entities


def load_simulation_config(path: Path | str) -> SimulationConfig:
    """
    Load a single arm profile from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated SimulationConfig

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Arm profile must be a mapping: {path}",
                details={"type": type(data).__name__},
            )
        data.setdefault("name", path.stem)
        return SimulationConfig(**data)
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(
            f"Failed to load arm profile: {path}",
            details={"error": str(e)},
        )


@dataclass
class ConfigManager:
    """
    Registry of arm profiles stored as ``<config_dir>/arms/*.yaml``.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> sim_config = config.get_arm("default")
    """

    config_dir: Path
    _arms: dict[str, SimulationConfig] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all arm profiles from disk."""
        arms_dir = self.config_dir / "arms"
        if arms_dir.exists():
            for config_file in sorted(arms_dir.glob("*.yaml")):
                self._arms[config_file.stem] = load_simulation_config(config_file)
        self._loaded = True

    def get_arm(self, name: str) -> SimulationConfig:
        """
        Get an arm profile by name.

        Args:
            name: Profile name (without .yaml extension)

        Returns:
            SimulationConfig instance

        Raises:
            ConfigurationError: If the profile is not found
        """
        if not self._loaded:
            self.load()

        if name not in self._arms:
            raise ConfigurationError(
                f"Arm profile not found: {name}",
                details={"available": list(self._arms.keys())},
            )
        return self._arms[name]

    def list_arms(self) -> list[str]:
        """List available arm profiles."""
        if not self._loaded:
            self.load()
        return list(self._arms.keys())

    def describe(self, name: str) -> dict[str, Any]:
        """Return a profile as a plain dict, for display."""
        return self.get_arm(name).model_dump()
