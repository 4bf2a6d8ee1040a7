"""Projection of camera-frame detections onto the field.

A detection is a ray out of the camera. After undoing the camera's
mounting yaw and pitch, the ray is scaled so its vertical component equals
the height difference between lens and target plane; the horizontal part
of the scaled ray is the target position relative to the camera.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..config import EstimatorConfig
from ..geometry import SE2
from .detection import TargetDetection


@dataclass(frozen=True)
class CameraMounting:
    """Fixed camera mounting corrections, set once at estimator reset.

    Attributes:
        pitch_correction: Angle (radians) that undoes the mounting pitch
        yaw_correction: Angle (radians) that undoes the mounting yaw
        differential_height: Target plane height minus lens height
        vehicle_to_camera: Planar offset of the camera on the vehicle
    """

    pitch_correction: float
    yaw_correction: float
    differential_height: float
    vehicle_to_camera: SE2

    @classmethod
    def from_config(cls, config: EstimatorConfig) -> CameraMounting:
        """Derive mounting corrections from the estimator configuration."""
        camera = config.camera
        return cls(
            pitch_correction=math.radians(-camera.pitch_degrees),
            yaw_correction=math.radians(-camera.yaw_degrees),
            differential_height=config.differential_height,
            vehicle_to_camera=SE2.from_translation(
                np.array([camera.x_offset, camera.y_offset])
            ),
        )


class VisionProjector:
    """Converts detections into field-frame target positions."""

    def __init__(self, mounting: CameraMounting) -> None:
        self._mounting = mounting
        self._cos_yaw = math.cos(mounting.yaw_correction)
        self._sin_yaw = math.sin(mounting.yaw_correction)
        self._cos_pitch = math.cos(mounting.pitch_correction)
        self._sin_pitch = math.sin(mounting.pitch_correction)

    @property
    def mounting(self) -> CameraMounting:
        """Mounting corrections in use."""
        return self._mounting

    def camera_relative(self, detection: TargetDetection) -> np.ndarray:
        """Return the target position in the camera's planar frame.

        The division by the corrected vertical component is unguarded: a
        ray parallel to the target plane yields inf/nan, and a ray pointing
        away from the plane yields a point behind the camera.

        Args:
            detection: Raw camera-frame detection

        Returns:
            (2,) position relative to the camera
        """
        # Compensate for camera yaw
        x_yaw = detection.x * self._cos_yaw + detection.y * self._sin_yaw
        y_yaw = detection.y * self._cos_yaw - detection.x * self._sin_yaw
        z_yaw = detection.z

        # Compensate for camera pitch
        x_r = z_yaw * self._sin_pitch + x_yaw * self._cos_pitch
        y_r = y_yaw
        z_r = z_yaw * self._cos_pitch - x_yaw * self._sin_pitch

        # Intersection of the ray with the target plane
        with np.errstate(divide="ignore", invalid="ignore"):
            scaling = np.float64(self._mounting.differential_height) / np.float64(z_r)
            distance = math.hypot(x_r, y_r) * scaling
            bearing = math.atan2(y_r, x_r)

            return np.array(
                [distance * math.cos(bearing), distance * math.sin(bearing)],
                dtype=np.float64,
            )

    def project(
        self, field_to_camera: SE2, detections: Sequence[TargetDetection]
    ) -> list[np.ndarray]:
        """Project detections into the field frame.

        Args:
            field_to_camera: Camera pose at capture time
            detections: Detections from one frame

        Returns:
            One (2,) field-frame position per detection, in input order
        """
        return [
            field_to_camera.transform_point(self.camera_relative(d))
            for d in detections
        ]
