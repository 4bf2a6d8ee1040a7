"""Raw camera-frame target detections."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class TargetDetection:
    """A single candidate target as reported by the vision pipeline.

    Coordinates are a direction in the camera frame: x forward along the
    optical axis, y to the left, z up. Only the direction matters; range is
    recovered by intersecting the ray with the target plane.

    Attributes:
        x: Forward component
        y: Leftward component
        z: Upward component (negative when the target is below the lens)
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_angles(cls, yaw: float, pitch: float) -> TargetDetection:
        """Create a unit-ray detection from camera-frame angles in radians.

        Args:
            yaw: Horizontal angle, CCW positive
            pitch: Vertical angle, up positive
        """
        return cls(
            x=float(np.cos(pitch) * np.cos(yaw)),
            y=float(np.cos(pitch) * np.sin(yaw)),
            z=float(np.sin(pitch)),
        )

    def to_array(self) -> np.ndarray:
        """Return (3,) array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)
