"""Odometry drift correction against a target at a known field position."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from ..vision.goal_tracker import TrackReport


class CorrectionStatus(Enum):
    """Outcome of a pose correction attempt."""

    APPLIED = "APPLIED"
    TOO_LARGE = "TOO_LARGE"  # Exceeds the sanity bound, not applied
    NO_TARGET = "NO_TARGET"  # Too few tracks to identify the primary target


@dataclass(frozen=True)
class CorrectionResult:
    """Result of ``compute_correction``.

    Attributes:
        status: Outcome
        correction: Field-frame shift to apply, None without a target
        magnitude: Length of the correction (0.0 without a target)
    """

    status: CorrectionStatus
    correction: np.ndarray | None = None
    magnitude: float = 0.0

    @property
    def applied(self) -> bool:
        return self.status == CorrectionStatus.APPLIED


def compute_correction(
    tracks: Sequence[TrackReport],
    known_position: np.ndarray,
    minimum_target_quantity: int,
    primary_target_index: int,
    max_correction_distance: float,
) -> CorrectionResult:
    """Compare the tracked primary target with where it really is.

    The correction is the shift that moves the tracked position onto the
    known one; moving the vehicle pose by the same shift removes the
    odometry drift accumulated since the target was last surveyed.

    Args:
        tracks: Tracker output in rank order
        known_position: (2,) true field position of the primary target
        minimum_target_quantity: Tracks required to trust the ranking
        primary_target_index: Rank of the primary target
        max_correction_distance: Largest correction accepted

    Returns:
        CorrectionResult; only APPLIED results should move the vehicle
    """
    if len(tracks) < minimum_target_quantity:
        return CorrectionResult(status=CorrectionStatus.NO_TARGET)

    tracked = np.asarray(tracks[primary_target_index].field_to_goal, dtype=np.float64)
    correction = np.asarray(known_position, dtype=np.float64).flatten() - tracked
    magnitude = float(np.linalg.norm(correction))

    if magnitude <= max_correction_distance:
        status = CorrectionStatus.APPLIED
    else:
        status = CorrectionStatus.TOO_LARGE

    return CorrectionResult(status=status, correction=correction, magnitude=magnitude)
