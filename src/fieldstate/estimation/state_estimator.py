"""Robot state estimator fusing odometry with vision target observations.

RobotStateEstimator combines:
- Pose history: interpolated field-to-vehicle poses from odometry
- Vision projection: camera detections placed on the field at capture time
- Goal tracking: projected targets persisted across frames
- Aiming: range, bearing and target orientation for the primary target
- Pose correction: bounded odometry reset against a surveyed target

The control loop and the vision pipeline run on different threads and
share one estimator. Every public method runs under a single lock; none of
them block, perform I/O or call back into user code while holding it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np

from ..config import EstimatorConfig
from ..geometry import SE2
from ..vision.detection import TargetDetection
from ..vision.goal_tracker import GoalTracker, GoalTrackerProtocol
from ..vision.projection import CameraMounting, VisionProjector
from .aiming import AimingParameters, AimingSynthesizer
from .correction import CorrectionResult, CorrectionStatus, compute_correction
from .pose_history import PoseHistory

logger = logging.getLogger(__name__)


@dataclass
class EstimatorSnapshot:
    """Consistent view of the estimator for telemetry."""

    timestamp: float
    field_to_vehicle: SE2
    goal_positions: list[np.ndarray] = field(default_factory=list)
    aiming: AimingParameters | None = None
    sees_target: bool = False
    distance_driven: float = 0.0


class RobotStateEstimator:
    """Time-indexed robot state with vision-based targeting.

    Construct one per process and hand it to both the control loop and
    the vision pipeline.
    """

    def __init__(
        self,
        config: EstimatorConfig | None = None,
        goal_tracker_factory: Callable[[], GoalTrackerProtocol] | None = None,
        pose_reset_callback: Callable[[SE2], None] | None = None,
    ) -> None:
        """Initialize the estimator at the origin.

        Args:
            config: Estimator configuration (defaults to ``EstimatorConfig()``)
            goal_tracker_factory: Builds the goal tracker, which is then
                cleared through its ``reset`` method on every estimator reset
                (default: ``GoalTracker`` with ``config.tracker``)
            pose_reset_callback: Called with the corrected pose after a
                successful ``reset_robot_position`` so the odometry source
                can continue from it
        """
        self._config = config if config is not None else EstimatorConfig()
        self._pose_reset_callback = pose_reset_callback
        self._lock = threading.RLock()

        self._history = PoseHistory(self._config.observation_buffer_size)
        self._goal_tracker: GoalTrackerProtocol = (
            goal_tracker_factory()
            if goal_tracker_factory is not None
            else GoalTracker(self._config.tracker)
        )
        self._mounting = CameraMounting.from_config(self._config)
        self._projector = VisionProjector(self._mounting)
        self._aiming = AimingSynthesizer(
            minimum_target_quantity=self._config.minimum_target_quantity,
            primary_target_index=self._config.primary_target_index,
        )
        self._sees_target = False
        self._distance_driven = 0.0

        self.reset(0.0, SE2.identity())

    @property
    def config(self) -> EstimatorConfig:
        return self._config

    @property
    def mounting(self) -> CameraMounting:
        return self._mounting

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, start_time: float, initial_field_to_vehicle: SE2) -> None:
        """Reset the field-to-vehicle transform and all derived state.

        Args:
            start_time: Timestamp of the initial pose (seconds)
            initial_field_to_vehicle: Vehicle pose that defines the origin
        """
        with self._lock:
            self._history.reset(start_time, initial_field_to_vehicle)
            self._goal_tracker.reset()
            self._mounting = CameraMounting.from_config(self._config)
            self._projector = VisionProjector(self._mounting)
            self._aiming.clear()
            self._sees_target = False
            self._distance_driven = 0.0
        logger.info("Estimator reset at t=%.3f to %r", start_time, initial_field_to_vehicle)

    def reset_distance_driven(self) -> None:
        with self._lock:
            self._distance_driven = 0.0

    # ------------------------------------------------------------------
    # Odometry
    # ------------------------------------------------------------------

    def add_field_to_vehicle_observation(self, timestamp: float, observation: SE2) -> None:
        """Record an odometry pose.

        Args:
            timestamp: Sample time in seconds, normally non-decreasing
            observation: Integrated field-to-vehicle pose
        """
        with self._lock:
            end = self._history.end_timestamp
            if end is not None and timestamp > end:
                _, previous = self._history.latest()
                self._distance_driven += float(
                    np.linalg.norm(observation.translation - previous.translation)
                )
            self._history.record(timestamp, observation)

    def get_field_to_vehicle(self, timestamp: float) -> SE2:
        """Vehicle pose at a timestamp, interpolated between samples."""
        with self._lock:
            return self._history.lookup(timestamp)

    def get_latest_field_to_vehicle(self) -> tuple[float, SE2]:
        """Most recent (timestamp, pose) sample."""
        with self._lock:
            return self._history.latest()

    def get_field_to_camera(self, timestamp: float) -> SE2:
        """Camera pose at a timestamp."""
        with self._lock:
            return self._history.lookup(timestamp) @ self._mounting.vehicle_to_camera

    @property
    def distance_driven(self) -> float:
        """Path length recorded since the last reset."""
        with self._lock:
            return self._distance_driven

    # ------------------------------------------------------------------
    # Vision
    # ------------------------------------------------------------------

    def add_vision_update(
        self, timestamp: float, vision_update: Sequence[TargetDetection]
    ) -> None:
        """Project a vision frame and feed it to the goal tracker.

        Frames with fewer than ``minimum_target_quantity`` detections are
        dropped as unreliable; the tracker still receives an empty update
        so that stale tracks age out.

        Args:
            timestamp: Capture time of the frame (not arrival time)
            vision_update: Detections in the frame
        """
        with self._lock:
            field_to_goals: list[np.ndarray] = []
            if len(vision_update) >= self._config.minimum_target_quantity:
                self._sees_target = True
                field_to_camera = (
                    self._history.lookup(timestamp) @ self._mounting.vehicle_to_camera
                )
                field_to_goals = self._projector.project(field_to_camera, vision_update)
            else:
                self._sees_target = False
            self._goal_tracker.update(timestamp, field_to_goals)

        logger.debug(
            "Vision frame t=%.3f: %d detections, %d projected",
            timestamp,
            len(vision_update),
            len(field_to_goals),
        )

    @property
    def sees_target(self) -> bool:
        """Whether the last vision frame had enough detections."""
        with self._lock:
            return self._sees_target

    def get_capture_time_field_to_goal(self) -> list[SE2]:
        """Field poses of all live goal tracks, in tracker order."""
        with self._lock:
            return [
                SE2.from_translation(report.field_to_goal)
                for report in self._goal_tracker.get_tracks()
            ]

    # ------------------------------------------------------------------
    # Aiming
    # ------------------------------------------------------------------

    def get_aiming_parameters(self) -> AimingParameters | None:
        """Recompute aiming parameters from the latest pose and tracks.

        Returns:
            New parameters, or None when too few targets are tracked (the
            cached value is then left as it was)
        """
        with self._lock:
            _, field_to_vehicle = self._history.latest()
            return self._aiming.compute(field_to_vehicle, self._goal_tracker.get_tracks())

    def get_cached_aiming_parameters(self) -> AimingParameters | None:
        """Last successful aiming parameters without recomputing."""
        with self._lock:
            return self._aiming.cached

    def get_oriented_target_position(
        self, aiming_parameters: AimingParameters | None
    ) -> SE2 | None:
        """Primary target position facing the target orientation.

        Args:
            aiming_parameters: Parameters supplying the orientation

        Returns:
            Target pose, or None without parameters or enough tracks
        """
        with self._lock:
            tracks = self._goal_tracker.get_tracks()
            if aiming_parameters is None or not self._aiming.has_enough_tracks(tracks):
                return None
            target = self._aiming.primary(tracks).field_to_goal
            return SE2.from_xytheta(
                target[0], target[1], aiming_parameters.target_orientation
            )

    def get_robot_scoring_position(
        self, aiming_parameters: AimingParameters | None
    ) -> SE2 | None:
        """Vehicle pose that puts the intake on the primary target.

        Backs off from the oriented target by the robot half length plus
        the intake extrusion, along the target orientation.
        """
        with self._lock:
            oriented = self.get_oriented_target_position(aiming_parameters)
            if oriented is None:
                return None
            standoff = self._config.robot_half_length + self._config.intake_extrusion
            return oriented @ SE2.from_translation(np.array([-standoff, 0.0]))

    # ------------------------------------------------------------------
    # Correction
    # ------------------------------------------------------------------

    def reset_robot_position(self, target_position: np.ndarray) -> CorrectionResult:
        """Correct odometry drift using a target at a known field position.

        The latest pose is shifted by the difference between the known and
        tracked positions of the primary target, keeping its heading. The
        shift is only applied if it is within ``max_correction_distance``.

        Only the newest history sample is rewritten. Lookups between the
        previous sample and it interpolate part of the shift, and without a
        ``pose_reset_callback`` the next sample from an uncorrected odometry
        source replaces it.

        Args:
            target_position: (2,) surveyed field position of the primary target

        Returns:
            CorrectionResult describing what happened
        """
        corrected: SE2 | None = None
        with self._lock:
            result = compute_correction(
                self._goal_tracker.get_tracks(),
                target_position,
                minimum_target_quantity=self._config.minimum_target_quantity,
                primary_target_index=self._config.primary_target_index,
                max_correction_distance=self._config.max_correction_distance,
            )
            if result.status == CorrectionStatus.APPLIED:
                timestamp, pose = self._history.latest()
                corrected = pose.translate_by(result.correction)
                self._history.record(timestamp, corrected)

        if result.status == CorrectionStatus.APPLIED:
            logger.info("Coordinates corrected by %.3f", result.magnitude)
            if self._pose_reset_callback is None:
                logger.warning(
                    "No pose reset callback; the next odometry sample will undo the correction"
                )
            elif corrected is not None:
                self._pose_reset_callback(corrected)
        elif result.status == CorrectionStatus.TOO_LARGE:
            logger.warning(
                "Coordinate correction too large: %.3f > %.3f",
                result.magnitude,
                self._config.max_correction_distance,
            )
        else:
            logger.warning("Vision did not detect target; no correction applied")

        return result

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def snapshot(self) -> EstimatorSnapshot:
        """Capture the current state for telemetry.

        Uses the cached aiming parameters so telemetry never changes the
        cache.
        """
        with self._lock:
            timestamp, pose = self._history.latest()
            return EstimatorSnapshot(
                timestamp=timestamp,
                field_to_vehicle=pose,
                goal_positions=[
                    np.asarray(r.field_to_goal).copy()
                    for r in self._goal_tracker.get_tracks()
                ],
                aiming=self._aiming.cached,
                sees_target=self._sees_target,
                distance_driven=self._distance_driven,
            )
