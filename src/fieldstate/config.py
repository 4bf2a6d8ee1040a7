"""Estimator configuration: mounting geometry, target layout and tracker tuning.

All lengths share one unit (inches by default). Angles in the YAML file
are degrees.

Example YAML:

    observation_buffer_size: 100
    minimum_target_quantity: 3
    primary_target_index: 2
    max_correction_distance: 5.0
    target_height: 28.625
    camera:
      x_offset: 9.0
      y_offset: 0.0
      z_offset: 43.0
      pitch_degrees: -22.0
      yaw_degrees: 0.0
    tracker:
      max_tracker_distance: 18.0
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class CameraConfig:
    """Camera mounting relative to the vehicle origin."""

    x_offset: float = 9.0  # Forward offset from vehicle origin
    y_offset: float = 0.0  # Leftward offset from vehicle origin
    z_offset: float = 43.0  # Lens height above the floor
    pitch_degrees: float = -22.0  # Mounting pitch, negative tilts down
    yaw_degrees: float = 0.0  # Mounting yaw, CCW positive


@dataclass(frozen=True)
class TrackerConfig:
    """Goal tracker tuning."""

    max_tracker_distance: float = 18.0  # Association gate
    max_track_age: float = 0.3  # Seconds without observation before a track dies
    max_smoothing_time: float = 0.5  # Observation window averaged per track
    camera_frame_rate: float = 90.0  # Expected vision frames per second


@dataclass(frozen=True)
class EstimatorConfig:
    """Top-level estimator configuration.

    Attributes:
        observation_buffer_size: Pose history capacity
        minimum_target_quantity: Detections/tracks needed to trust a target
        primary_target_index: Rank of the primary target in the tracker order
        max_correction_distance: Largest accepted odometry correction
        target_height: Height of the vision target plane above the floor
        robot_half_length: Distance from vehicle origin to bumper
        intake_extrusion: Distance the intake reaches past the bumper
        camera: Camera mounting
        tracker: Goal tracker tuning
    """

    observation_buffer_size: int = 100
    minimum_target_quantity: int = 3
    primary_target_index: int = 2
    max_correction_distance: float = 5.0
    target_height: float = 28.625
    robot_half_length: float = 18.0
    intake_extrusion: float = 6.0
    camera: CameraConfig = field(default_factory=CameraConfig)
    tracker: TrackerConfig = field(default_factory=TrackerConfig)

    def __post_init__(self) -> None:
        self.validate()

    @property
    def differential_height(self) -> float:
        """Height of the target plane relative to the camera lens."""
        return self.target_height - self.camera.z_offset

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: If any value is out of range
        """
        if self.observation_buffer_size < 1:
            raise ValueError(
                f"observation_buffer_size must be >= 1, got {self.observation_buffer_size}"
            )
        if self.minimum_target_quantity < 2:
            raise ValueError(
                "minimum_target_quantity must be >= 2 to define a target line, "
                f"got {self.minimum_target_quantity}"
            )
        if not 0 <= self.primary_target_index < self.minimum_target_quantity:
            raise ValueError(
                f"primary_target_index {self.primary_target_index} must be within "
                f"[0, {self.minimum_target_quantity})"
            )
        if self.max_correction_distance < 0:
            raise ValueError(
                f"max_correction_distance must be >= 0, got {self.max_correction_distance}"
            )
        if self.tracker.max_track_age <= 0 or self.tracker.camera_frame_rate <= 0:
            raise ValueError("Tracker max_track_age and camera_frame_rate must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EstimatorConfig:
        """Build a config from a parsed mapping, rejecting unknown keys.

        Raises:
            ValueError: If keys are unknown or values have the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got {type(data).__name__}")

        data = dict(data)
        camera = _build_section(CameraConfig, data.pop("camera", None) or {}, "camera")
        tracker = _build_section(
            TrackerConfig, data.pop("tracker", None) or {}, "tracker"
        )
        top = _coerce(cls, data, "estimator", skip={"camera", "tracker"})
        return cls(camera=camera, tracker=tracker, **top)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> EstimatorConfig:
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML file

        Returns:
            Parsed configuration

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file content is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Estimator config not found: {yaml_path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()
        try:
            return cls.from_dict(data)
        except ValueError as e:
            raise ValueError(f"Invalid estimator config in {yaml_path}: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Return a plain mapping suitable for ``yaml.safe_dump``."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (CameraConfig, TrackerConfig)):
                value = {sf.name: getattr(value, sf.name) for sf in fields(value)}
            out[f.name] = value
        return out


def _coerce(
    cls: type, data: dict[str, Any], section: str, skip: set[str] | None = None
) -> dict[str, Any]:
    known = {f.name: f for f in fields(cls) if f.name not in (skip or set())}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"Unknown {section} keys: {sorted(unknown)}")

    out: dict[str, Any] = {}
    for name, value in data.items():
        target = int if known[name].type in ("int", int) else float
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{section}.{name} must be a number, got {value!r}")
        if target is int and not float(value).is_integer():
            raise ValueError(f"{section}.{name} must be an integer, got {value!r}")
        out[name] = target(value)
    return out


def _build_section(cls: type, data: Any, section: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"{section} must be a mapping, got {type(data).__name__}")
    return cls(**_coerce(cls, data, section))
