"""Tests for EstimatorVisualizer."""

import numpy as np
import pytest

from fieldstate import SE2, EstimatorVisualizer
from fieldstate.estimation import AimingParameters, EstimatorSnapshot


@pytest.fixture
def visualizer() -> EstimatorVisualizer:
    """Visualizer that records without spawning a viewer."""
    return EstimatorVisualizer(app_name="fieldstate-test", spawn=False, max_trajectory_length=3)


class TestEstimatorVisualizer:
    """Test suite for EstimatorVisualizer."""

    def test_log_snapshot_without_target(self, visualizer: EstimatorVisualizer):
        snapshot = EstimatorSnapshot(timestamp=0.0, field_to_vehicle=SE2.identity())
        visualizer.log_snapshot(snapshot)
        assert visualizer.trajectory.shape == (1, 2)

    def test_log_snapshot_with_target(self, visualizer: EstimatorVisualizer):
        snapshot = EstimatorSnapshot(
            timestamp=1.0,
            field_to_vehicle=SE2.from_xytheta(10.0, 0.0, 0.0),
            goal_positions=[np.array([20.0, -10.0]), np.array([20.0, 10.0])],
            aiming=AimingParameters(
                range=10.0,
                robot_to_goal=0.0,
                latest_timestamp=0.5,
                stability=1.0,
                target_orientation=0.0,
            ),
            sees_target=True,
            distance_driven=10.0,
        )
        visualizer.log_snapshot(snapshot)
        np.testing.assert_allclose(visualizer.trajectory[-1], [10.0, 0.0])

    def test_trajectory_is_bounded(self, visualizer: EstimatorVisualizer):
        for i in range(5):
            visualizer.log_snapshot(
                EstimatorSnapshot(
                    timestamp=float(i), field_to_vehicle=SE2.from_xytheta(float(i), 0.0)
                )
            )
        np.testing.assert_allclose(visualizer.trajectory[:, 0], [2.0, 3.0, 4.0])
