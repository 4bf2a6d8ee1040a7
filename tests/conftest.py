"""Shared fixtures for estimator tests."""

from __future__ import annotations

import math
from typing import Callable

import numpy as np
import pytest

from fieldstate import SE2, CameraConfig, EstimatorConfig, TargetDetection, TrackReport
from fieldstate.vision.projection import CameraMounting


@pytest.fixture
def level_config() -> EstimatorConfig:
    """Config with a level, forward-facing camera 10 units above the target plane.

    Returns:
        EstimatorConfig whose camera sits 5 units ahead of the vehicle origin
    """
    return EstimatorConfig(
        target_height=30.0,
        robot_half_length=18.0,
        intake_extrusion=6.0,
        camera=CameraConfig(
            x_offset=5.0, y_offset=0.0, z_offset=40.0, pitch_degrees=0.0, yaw_degrees=0.0
        ),
    )


@pytest.fixture
def detection_for() -> Callable[[CameraMounting, SE2, np.ndarray], TargetDetection]:
    """Build the raw detection a camera would report for a field target.

    Returns:
        Function (mounting, field_to_camera, target) -> TargetDetection
    """

    def _detection_for(
        mounting: CameraMounting, field_to_camera: SE2, target: np.ndarray
    ) -> TargetDetection:
        dx, dy = field_to_camera.inverse().transform_point(target)
        dz = mounting.differential_height

        # Undo pitch correction, then yaw correction
        cp, sp = math.cos(mounting.pitch_correction), math.sin(mounting.pitch_correction)
        x_yaw = dx * cp - dz * sp
        z = dx * sp + dz * cp
        cy, sy = math.cos(mounting.yaw_correction), math.sin(mounting.yaw_correction)
        return TargetDetection(x=x_yaw * cy - dy * sy, y=x_yaw * sy + dy * cy, z=z)

    return _detection_for


@pytest.fixture
def make_tracks() -> Callable[..., list[TrackReport]]:
    """Build track reports from positions, in rank order.

    Returns:
        Function (*positions, timestamp=1.0, stability=1.0) -> list[TrackReport]
    """

    def _make_tracks(*positions, timestamp: float = 1.0, stability: float = 1.0):
        return [
            TrackReport(
                track_id=i,
                field_to_goal=np.asarray(p, dtype=np.float64),
                latest_timestamp=timestamp,
                stability=stability,
            )
            for i, p in enumerate(positions)
        ]

    return _make_tracks
