"""Rerun-based telemetry for the robot state estimator."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import rerun as rr
import rerun.blueprint as rrb

if TYPE_CHECKING:
    from ..estimation.state_estimator import EstimatorSnapshot


class EstimatorVisualizer:
    """Rerun visualization of estimator snapshots.

    Entity hierarchy:
        field/
            vehicle             - Current vehicle position and heading
            trajectory          - Vehicle positions logged so far
            goals               - Live goal track positions
            aim                 - Vehicle-to-primary-target ray
        aiming/
            range               - Range to primary target
            bearing_deg         - Bearing of primary target
            target_orientation_deg
        status/
            sees_target         - 1.0 when the last frame had a target
            distance_driven
    """

    def __init__(
        self,
        app_name: str = "fieldstate",
        spawn: bool = True,
        max_trajectory_length: int = 1000,
    ) -> None:
        """Initialize Rerun visualization.

        Args:
            app_name: Name for the Rerun application window
            spawn: If True, automatically spawn the Rerun viewer
            max_trajectory_length: Vehicle positions kept for the trail
        """
        rr.init(app_name, spawn=spawn)
        self._trajectory: list[np.ndarray] = []
        self._max_trajectory_length = max_trajectory_length
        self._setup_layout()

    def _setup_layout(self) -> None:
        """Configure the viewer layout"""
        blueprint = rrb.Blueprint(
            rrb.Horizontal(
                contents=[
                    rrb.Spatial2DView(name="Field", origin="field"),
                    rrb.Vertical(
                        contents=[
                            rrb.TimeSeriesView(name="Aiming", origin="aiming"),
                            rrb.TimeSeriesView(name="Status", origin="status"),
                        ]
                    ),
                ]
            )
        )
        rr.send_blueprint(blueprint)

    @property
    def trajectory(self) -> np.ndarray:
        """Logged vehicle positions as Nx2 array."""
        if not self._trajectory:
            return np.zeros((0, 2))
        return np.array(self._trajectory)

    def log_snapshot(self, snapshot: EstimatorSnapshot) -> None:
        """Log one estimator snapshot.

        Args:
            snapshot: State captured by ``RobotStateEstimator.snapshot()``
        """
        rr.set_time("timestamp", duration=snapshot.timestamp)

        self._log_vehicle(snapshot)
        self._log_goals(snapshot)
        self._log_aiming(snapshot)

        rr.log("status/sees_target", rr.Scalars(1.0 if snapshot.sees_target else 0.0))
        rr.log("status/distance_driven", rr.Scalars(snapshot.distance_driven))

    def _log_vehicle(self, snapshot: EstimatorSnapshot) -> None:
        """Log the vehicle pose as a heading arrow plus a position trail."""
        pose = snapshot.field_to_vehicle
        position = pose.position
        heading = pose.rotation[:, 0]

        self._trajectory.append(position)
        if len(self._trajectory) > self._max_trajectory_length:
            self._trajectory = self._trajectory[-self._max_trajectory_length :]

        rr.log(
            "field/vehicle",
            rr.Arrows2D(
                origins=[position],
                vectors=[heading * 12.0],
                colors=[[0, 255, 255]],  # Cyan
            ),
        )

        if len(self._trajectory) >= 2:
            rr.log(
                "field/trajectory",
                rr.LineStrips2D(
                    [np.array(self._trajectory)],
                    colors=[[255, 255, 0]],  # Yellow
                ),
            )

    def _log_goals(self, snapshot: EstimatorSnapshot) -> None:
        """Log live goal tracks; the list order is the tracker rank."""
        if not snapshot.goal_positions:
            rr.log("field/goals", rr.Clear(recursive=False))
            return

        positions = np.array(snapshot.goal_positions, dtype=np.float64)
        valid = np.isfinite(positions).all(axis=1)
        rr.log(
            "field/goals",
            rr.Points2D(
                positions[valid],
                colors=[[255, 0, 0]],  # Red
                radii=2.0,
                labels=[str(i) for i in np.flatnonzero(valid)],
            ),
        )

    def _log_aiming(self, snapshot: EstimatorSnapshot) -> None:
        """Log aiming scalars, or zeros when no target is known."""
        aiming = snapshot.aiming
        if aiming is None:
            rr.log("aiming/range", rr.Scalars(0.0))
            rr.log("aiming/bearing_deg", rr.Scalars(0.0))
            rr.log("field/aim", rr.Clear(recursive=False))
            return

        rr.log("aiming/range", rr.Scalars(aiming.range))
        rr.log("aiming/bearing_deg", rr.Scalars(math.degrees(aiming.robot_to_goal)))
        rr.log(
            "aiming/target_orientation_deg",
            rr.Scalars(math.degrees(aiming.target_orientation)),
        )

        origin = snapshot.field_to_vehicle.position
        vector = aiming.range * np.array(
            [math.cos(aiming.robot_to_goal), math.sin(aiming.robot_to_goal)]
        )
        rr.log(
            "field/aim",
            rr.Arrows2D(
                origins=[origin],
                vectors=[vector],
                colors=[[0, 255, 0]],  # Green
            ),
        )
