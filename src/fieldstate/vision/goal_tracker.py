"""Goal track management across vision frames.

Tracks are field-frame target positions persisted across multiple vision
frames. Each frame's projected points are associated with live tracks,
new tracks are started for unmatched points, and tracks that stop being
observed age out.

Ordering contract: ``get_tracks()`` lists live tracks in creation order
(ascending ``track_id``). Tracks started from the same frame keep the
order of the points in that frame, so a vision pipeline that reports
targets in a fixed order (e.g. left tape, right tape, centre) yields
stable rank indices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

import numpy as np
from scipy.optimize import linear_sum_assignment

from ..config import TrackerConfig


@dataclass(frozen=True)
class TrackReport:
    """Read-only view of a track handed to the estimator.

    Attributes:
        track_id: Unique identifier, increasing with creation time
        field_to_goal: Smoothed (2,) field-frame position
        latest_timestamp: Time of the most recent observation
        stability: Observation density in [0, 1]
    """

    track_id: int
    field_to_goal: np.ndarray
    latest_timestamp: float
    stability: float


class GoalTrackerProtocol(Protocol):
    """Interface the estimator needs from a goal tracker."""

    def update(self, timestamp: float, field_to_goals: Sequence[np.ndarray]) -> None:
        ...

    def get_tracks(self) -> list[TrackReport]:
        ...

    def reset(self) -> None:
        ...


@dataclass
class GoalTrack:
    """A target observed over several frames.

    Attributes:
        track_id: Unique identifier for this track
        observations: timestamp -> (2,) field position, oldest first
    """

    track_id: int
    observations: dict[float, np.ndarray] = field(default_factory=dict)

    @property
    def latest_timestamp(self) -> float:
        """Timestamp of the most recent observation."""
        return max(self.observations)

    @property
    def position(self) -> np.ndarray:
        """Mean of the observations still in the smoothing window."""
        return np.mean(np.stack(list(self.observations.values())), axis=0)

    def add_observation(self, timestamp: float, position: np.ndarray) -> None:
        self.observations[timestamp] = np.asarray(position, dtype=np.float64).copy()

    def prune(self, now: float, smoothing_time: float) -> None:
        """Drop observations older than the smoothing window, keeping the latest."""
        latest = self.latest_timestamp
        self.observations = {
            t: p
            for t, p in self.observations.items()
            if now - t <= smoothing_time or t == latest
        }

    def is_alive(self, now: float, max_age: float) -> bool:
        return now - self.latest_timestamp <= max_age

    def stability(self, config: TrackerConfig) -> float:
        expected = config.camera_frame_rate * config.max_track_age
        return min(1.0, len(self.observations) / expected)

    def to_report(self, config: TrackerConfig) -> TrackReport:
        return TrackReport(
            track_id=self.track_id,
            field_to_goal=self.position,
            latest_timestamp=self.latest_timestamp,
            stability=self.stability(config),
        )


class GoalTracker:
    """Associates per-frame field positions into persistent goal tracks."""

    def __init__(self, config: TrackerConfig | None = None) -> None:
        """Initialize goal tracker.

        Args:
            config: Tracker tuning (defaults to ``TrackerConfig()``)
        """
        self._config = config if config is not None else TrackerConfig()
        self._tracks: list[GoalTrack] = []
        self._next_id = 0

    @property
    def config(self) -> TrackerConfig:
        return self._config

    def reset(self) -> None:
        """Remove all tracks."""
        self._tracks = []
        self._next_id = 0

    def update(self, timestamp: float, field_to_goals: Sequence[np.ndarray]) -> None:
        """Process one vision frame.

        An empty list still advances time so unobserved tracks age out.
        Non-finite positions (rays parallel to the target plane) are
        ignored; the remaining points keep their relative order.

        Args:
            timestamp: Capture time of the frame
            field_to_goals: Field-frame positions seen in the frame
        """
        self._tracks = [
            t for t in self._tracks if t.is_alive(timestamp, self._config.max_track_age)
        ]

        points = [np.asarray(p, dtype=np.float64) for p in field_to_goals]
        points = [p for p in points if np.all(np.isfinite(p))]
        matched_points: set[int] = set()

        if self._tracks and points:
            for track_idx, point_idx in self._associate(points):
                self._tracks[track_idx].add_observation(timestamp, points[point_idx])
                matched_points.add(point_idx)

        for i, point in enumerate(points):
            if i in matched_points:
                continue
            track = GoalTrack(track_id=self._next_id)
            track.add_observation(timestamp, point)
            self._tracks.append(track)
            self._next_id += 1

        for track in self._tracks:
            track.prune(timestamp, self._config.max_smoothing_time)

    def _associate(self, points: list[np.ndarray]) -> list[tuple[int, int]]:
        """Minimum-distance assignment of points to tracks within the gate.

        Returns:
            List of (track_index, point_index) pairs
        """
        track_positions = np.stack([t.position for t in self._tracks])
        point_array = np.stack(points)
        cost = np.linalg.norm(
            track_positions[:, None, :] - point_array[None, :, :], axis=2
        )

        gate = self._config.max_tracker_distance
        in_gate = np.isfinite(cost) & (cost <= gate)
        if not in_gate.any():
            return []

        # Out-of-gate pairs get a cost no in-gate assignment can beat
        gated = np.where(in_gate, cost, gate * 10.0 + cost[in_gate].max() + 1.0)
        rows, cols = linear_sum_assignment(gated)
        return [(int(r), int(c)) for r, c in zip(rows, cols) if in_gate[r, c]]

    def get_tracks(self) -> list[TrackReport]:
        """Return reports for live tracks in creation order."""
        return [t.to_report(self._config) for t in self._tracks]

    def __len__(self) -> int:
        """Number of live tracks."""
        return len(self._tracks)
