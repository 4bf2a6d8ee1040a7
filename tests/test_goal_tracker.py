"""Tests for GoalTracker class."""

import numpy as np
import pytest

from fieldstate import TrackerConfig
from fieldstate.vision import GoalTracker

LEFT = np.array([100.0, 6.0])
RIGHT = np.array([100.0, -6.0])
CENTRE = np.array([100.0, 0.0])


@pytest.fixture
def tracker() -> GoalTracker:
    """Tracker expecting 10 frames/s, tracks dying after 0.3 s without updates.

    Returns:
        Empty GoalTracker
    """
    return GoalTracker(
        TrackerConfig(
            max_tracker_distance=4.0,
            max_track_age=0.3,
            max_smoothing_time=0.5,
            camera_frame_rate=10.0,
        )
    )


class TestGoalTracker:
    """Test suite for GoalTracker."""

    def test_first_frame_creates_tracks_in_order(self, tracker: GoalTracker):
        """Tracks from one frame keep the frame's point order."""
        tracker.update(0.0, [RIGHT, LEFT, CENTRE])
        tracks = tracker.get_tracks()

        assert [t.track_id for t in tracks] == [0, 1, 2]
        np.testing.assert_allclose(tracks[0].field_to_goal, RIGHT)
        np.testing.assert_allclose(tracks[1].field_to_goal, LEFT)
        np.testing.assert_allclose(tracks[2].field_to_goal, CENTRE)
        assert all(t.latest_timestamp == 0.0 for t in tracks)

    def test_order_is_stable_when_input_order_changes(self, tracker: GoalTracker):
        """Association is by position, so reshuffled frames keep rank indices."""
        tracker.update(0.0, [RIGHT, LEFT, CENTRE])
        tracker.update(0.1, [CENTRE + 0.5, LEFT + 0.5, RIGHT + 0.5])

        tracks = tracker.get_tracks()
        assert len(tracks) == 3
        np.testing.assert_allclose(tracks[0].field_to_goal, RIGHT + 0.25)
        np.testing.assert_allclose(tracks[1].field_to_goal, LEFT + 0.25)
        np.testing.assert_allclose(tracks[2].field_to_goal, CENTRE + 0.25)

    def test_far_point_starts_new_track(self, tracker: GoalTracker):
        """Points beyond the association gate become new tracks."""
        tracker.update(0.0, [CENTRE])
        tracker.update(0.1, [CENTRE + np.array([10.0, 0.0])])

        tracks = tracker.get_tracks()
        assert len(tracks) == 2
        np.testing.assert_allclose(tracks[0].field_to_goal, CENTRE)
        assert tracks[0].latest_timestamp == 0.0
        assert tracks[1].latest_timestamp == 0.1

    def test_tracks_age_out_on_empty_frames(self, tracker: GoalTracker):
        """An empty update still advances time and removes stale tracks."""
        tracker.update(0.0, [RIGHT, LEFT, CENTRE])
        tracker.update(0.2, [])
        assert len(tracker) == 3

        tracker.update(0.5, [])
        assert tracker.get_tracks() == []

    def test_stability_grows_with_observations(self, tracker: GoalTracker):
        """Stability is observation count over expected frames, capped at 1."""
        tracker.update(0.0, [CENTRE])
        assert tracker.get_tracks()[0].stability == pytest.approx(1.0 / 3.0)

        tracker.update(0.1, [CENTRE])
        tracker.update(0.2, [CENTRE])
        tracker.update(0.3, [CENTRE])
        assert tracker.get_tracks()[0].stability == pytest.approx(1.0)

    def test_old_observations_leave_smoothing_window(self, tracker: GoalTracker):
        """Only observations inside the smoothing window are averaged."""
        tracker.update(0.0, [CENTRE])
        for i in range(1, 9):
            tracker.update(0.1 * i, [CENTRE + np.array([2.0, 0.0])])

        np.testing.assert_allclose(
            tracker.get_tracks()[0].field_to_goal, CENTRE + np.array([2.0, 0.0])
        )

    def test_reset(self, tracker: GoalTracker):
        """Reset drops tracks and restarts ids."""
        tracker.update(0.0, [CENTRE])
        tracker.reset()
        assert len(tracker) == 0

        tracker.update(1.0, [LEFT])
        assert tracker.get_tracks()[0].track_id == 0

    def test_non_finite_point_is_ignored(self, tracker: GoalTracker):
        """A non-finite point neither starts a track nor breaks later frames."""
        tracker.update(0.0, [RIGHT, LEFT, np.array([-np.inf, np.nan])])
        assert len(tracker) == 2

        tracker.update(0.1, [RIGHT, LEFT, CENTRE])
        tracks = tracker.get_tracks()
        assert [t.track_id for t in tracks] == [0, 1, 2]
        np.testing.assert_allclose(tracks[0].field_to_goal, RIGHT)
        np.testing.assert_allclose(tracks[1].field_to_goal, LEFT)
        np.testing.assert_allclose(tracks[2].field_to_goal, CENTRE)

    def test_non_finite_point_after_good_frame(self, tracker: GoalTracker):
        """Live tracks keep their order when a later frame has a non-finite point."""
        tracker.update(0.0, [RIGHT, LEFT, CENTRE])
        tracker.update(0.1, [RIGHT, np.array([np.nan, np.nan]), CENTRE])

        tracks = tracker.get_tracks()
        assert [t.track_id for t in tracks] == [0, 1, 2]
        np.testing.assert_allclose(tracks[1].field_to_goal, LEFT)
        assert tracks[1].latest_timestamp == 0.0
        assert tracks[2].latest_timestamp == 0.1
