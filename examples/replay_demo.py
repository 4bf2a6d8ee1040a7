#!/usr/bin/env python3
"""Demo script for the robot state estimator on a synthetic approach.

Simulates a vehicle driving toward a three-point vision target with
drifting odometry. Vision frames are captured with pipeline latency and
placed against the interpolated pose at capture time. Near the end the
known target position is used to correct the accumulated drift.

Usage:
    uv run python examples/replay_demo.py
"""

import math
from pathlib import Path

import numpy as np

from fieldstate import (
    SE2,
    EstimatorConfig,
    EstimatorVisualizer,
    RobotStateEstimator,
    TargetDetection,
)

# Field positions of the right tape, left tape and centre of the target face,
# in the order the vision pipeline reports them
TARGETS = np.array([[200.0, -6.0], [200.0, 6.0], [200.0, 0.0]])


def raw_detection(
    estimator: RobotStateEstimator, field_to_camera: SE2, target: np.ndarray
) -> TargetDetection:
    """Build the ray a camera at ``field_to_camera`` would report for ``target``."""
    mounting = estimator.mounting
    dx, dy = field_to_camera.inverse().transform_point(target)
    dz = mounting.differential_height

    # Undo pitch correction, then yaw correction
    cp, sp = math.cos(mounting.pitch_correction), math.sin(mounting.pitch_correction)
    x_yaw = dx * cp - dz * sp
    z = dx * sp + dz * cp
    cy, sy = math.cos(mounting.yaw_correction), math.sin(mounting.yaw_correction)
    x = x_yaw * cy - dy * sy
    y = x_yaw * sy + dy * cy
    return TargetDetection(x=x, y=y, z=z)


def main() -> None:
    """Run the estimator demo."""
    # Configuration
    config_path = Path(__file__).parent / "estimator.yaml"
    visualize = False
    control_dt = 0.01  # 100 Hz odometry
    vision_period = 3  # one vision frame every 3 control cycles
    vision_latency = 0.04  # seconds between capture and processing
    speed = 60.0  # inches per second
    drift_per_second = np.array([0.0, 1.5])  # odometry lateral drift
    duration = 2.0

    config = EstimatorConfig.from_yaml(config_path)
    estimator = RobotStateEstimator(config)
    visualizer = EstimatorVisualizer(spawn=True) if visualize else None

    print("Running synthetic approach...")
    print("=" * 80)
    print(f"{'Time':>6} | {'Odometry pose':^28} | {'Range':>8} | {'Bearing':>8} | {'Sees':^5}")
    print("-" * 80)

    pending: list[tuple[float, list[TargetDetection]]] = []
    n_steps = int(duration / control_dt)

    for step in range(n_steps + 1):
        t = step * control_dt
        true_pose = SE2.from_xytheta(speed * t, 0.0, 0.0)
        odom_pose = true_pose.translate_by(drift_per_second * t)
        estimator.add_field_to_vehicle_observation(t, odom_pose)

        # The camera sees the true world; the estimator only knows odometry
        if step % vision_period == 0:
            field_to_camera = true_pose @ estimator.mounting.vehicle_to_camera
            detections = [raw_detection(estimator, field_to_camera, p) for p in TARGETS]
            pending.append((t, detections))

        while pending and pending[0][0] + vision_latency <= t:
            capture_time, detections = pending.pop(0)
            estimator.add_vision_update(capture_time, detections)
            estimator.get_aiming_parameters()

        if visualizer is not None:
            visualizer.log_snapshot(estimator.snapshot())

        if step % 25 == 0:
            aiming = estimator.get_cached_aiming_parameters()
            pose = odom_pose.translation
            pose_str = f"[{pose[0]:8.2f}, {pose[1]:8.2f}]"
            if aiming is not None:
                print(
                    f"{t:6.2f} | {pose_str:^28} | {aiming.range:8.2f} | "
                    f"{math.degrees(aiming.robot_to_goal):7.2f}d | {estimator.sees_target!s:^5}"
                )
            else:
                print(f"{t:6.2f} | {pose_str:^28} | {'N/A':>8} | {'N/A':>8} | {estimator.sees_target!s:^5}")

    # Correct drift against the surveyed primary target
    result = estimator.reset_robot_position(TARGETS[config.primary_target_index])
    _, corrected = estimator.get_latest_field_to_vehicle()

    print()
    print("=" * 80)
    print("SUMMARY")
    print("=" * 80)
    print(f"Distance driven:     {estimator.distance_driven:.2f} in")
    print(f"Correction status:   {result.status.value}")
    print(f"Correction size:     {result.magnitude:.3f} in")
    print(f"Corrected position:  [{corrected.translation[0]:.2f}, {corrected.translation[1]:.2f}]")
    print(f"True position:       [{speed * duration:.2f}, 0.00]")

    scoring = estimator.get_robot_scoring_position(estimator.get_cached_aiming_parameters())
    if scoring is not None:
        print(f"Scoring pose:        {scoring!r}")


if __name__ == "__main__":
    main()
