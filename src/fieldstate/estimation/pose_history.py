"""Bounded, time-indexed history of field-to-vehicle poses.

Odometry arrives at the control-loop rate while vision frames describe the
world as it was when the image was captured, tens of milliseconds earlier.
The history lets a vision frame be placed against the vehicle pose at its
capture instant, interpolating between the two odometry samples that
bracket it.
"""

from __future__ import annotations

import bisect

from ..geometry import SE2

DEFAULT_CAPACITY = 100


class EmptyHistoryError(LookupError):
    """Raised when a history that was never seeded is queried."""


class PoseHistory:
    """Ordered field-to-vehicle poses with interpolated lookup.

    Samples are kept sorted by timestamp with at most one pose per
    timestamp. When the capacity is exceeded the oldest sample is evicted.
    Poses are copied on the way in and on the way out, so callers never
    alias stored state.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize an empty history.

        Args:
            capacity: Maximum number of samples retained
        """
        if capacity < 1:
            raise ValueError(f"Capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._timestamps: list[float] = []  # seconds, ascending
        self._poses: list[SE2] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def reset(self, timestamp: float, pose: SE2) -> None:
        """Clear the history and seed it with a single sample."""
        self._timestamps = []
        self._poses = []
        self.record(timestamp, pose)

    def record(self, timestamp: float, pose: SE2) -> None:
        """Insert a sample.

        Samples may arrive out of order. A sample at an existing timestamp
        replaces the stored pose.

        Args:
            timestamp: Sample time in seconds
            pose: Field-to-vehicle pose
        """
        timestamp = float(timestamp)
        idx = bisect.bisect_left(self._timestamps, timestamp)

        if idx < len(self._timestamps) and self._timestamps[idx] == timestamp:
            self._poses[idx] = pose.copy()
            return

        self._timestamps.insert(idx, timestamp)
        self._poses.insert(idx, pose.copy())

        if len(self._timestamps) > self._capacity:
            del self._timestamps[0]
            del self._poses[0]

    def lookup(self, timestamp: float) -> SE2:
        """Return the pose at a timestamp.

        Exact matches are returned as stored. Between two samples the
        translation is interpolated linearly and the heading along the
        shortest arc. Queries outside the stored range clamp to the
        nearest boundary sample.

        Raises:
            EmptyHistoryError: If the history holds no samples
        """
        if not self._timestamps:
            raise EmptyHistoryError("Pose history queried before any sample was recorded")

        if timestamp <= self._timestamps[0]:
            return self._poses[0].copy()
        if timestamp >= self._timestamps[-1]:
            return self._poses[-1].copy()

        idx = bisect.bisect_left(self._timestamps, timestamp)

        # Exact match
        if self._timestamps[idx] == timestamp:
            return self._poses[idx].copy()

        t0 = self._timestamps[idx - 1]
        t1 = self._timestamps[idx]
        alpha = (timestamp - t0) / (t1 - t0)

        return self._poses[idx - 1].interpolate(self._poses[idx], alpha)

    def latest(self) -> tuple[float, SE2]:
        """Return the most recent (timestamp, pose).

        Raises:
            EmptyHistoryError: If the history holds no samples
        """
        if not self._timestamps:
            raise EmptyHistoryError("Pose history has no latest sample")
        return self._timestamps[-1], self._poses[-1].copy()

    def earliest(self) -> tuple[float, SE2]:
        """Return the oldest retained (timestamp, pose).

        Raises:
            EmptyHistoryError: If the history holds no samples
        """
        if not self._timestamps:
            raise EmptyHistoryError("Pose history has no earliest sample")
        return self._timestamps[0], self._poses[0].copy()

    def timestamps(self) -> list[float]:
        """Return retained timestamps, oldest first."""
        return list(self._timestamps)

    @property
    def start_timestamp(self) -> float | None:
        """Oldest retained timestamp in seconds."""
        return self._timestamps[0] if self._timestamps else None

    @property
    def end_timestamp(self) -> float | None:
        """Newest retained timestamp in seconds."""
        return self._timestamps[-1] if self._timestamps else None

    def __len__(self) -> int:
        """Number of retained samples."""
        return len(self._poses)

    def __contains__(self, timestamp: float) -> bool:
        idx = bisect.bisect_left(self._timestamps, timestamp)
        return idx < len(self._timestamps) and self._timestamps[idx] == timestamp
