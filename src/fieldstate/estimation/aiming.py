"""Aiming parameters derived from the vehicle pose and goal tracks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..geometry import SE2, wrap_angle
from ..vision.goal_tracker import TrackReport


@dataclass(frozen=True)
class AimingParameters:
    """Targeting solution for the primary goal.

    Attributes:
        range: Distance from vehicle origin to the primary target
        robot_to_goal: Direction of the vehicle-to-target vector, radians,
            measured from the field +x axis
        latest_timestamp: Time the primary target was last observed
        stability: Tracker stability of the primary target
        target_orientation: Field heading of the target face, radians
    """

    range: float
    robot_to_goal: float
    latest_timestamp: float
    stability: float
    target_orientation: float

    def heading_error(self, vehicle_heading: float) -> float:
        """Angle to turn from ``vehicle_heading`` to face the target, in [-pi, pi)."""
        return wrap_angle(self.robot_to_goal - vehicle_heading)


class AimingSynthesizer:
    """Computes and caches aiming parameters.

    The tracks passed in must follow the tracker's ordering contract:
    ranks 0 and 1 span the target face and ``primary_target_index`` is
    the target to aim at.
    """

    def __init__(self, minimum_target_quantity: int = 3, primary_target_index: int = 2) -> None:
        self._minimum_target_quantity = minimum_target_quantity
        self._primary_target_index = primary_target_index
        self._cached: AimingParameters | None = None

    @property
    def cached(self) -> AimingParameters | None:
        """Last successful result, or None if none has been computed."""
        return self._cached

    def clear(self) -> None:
        self._cached = None

    def has_enough_tracks(self, tracks: Sequence[TrackReport]) -> bool:
        return len(tracks) >= self._minimum_target_quantity

    def primary(self, tracks: Sequence[TrackReport]) -> TrackReport:
        return tracks[self._primary_target_index]

    @staticmethod
    def target_orientation(tracks: Sequence[TrackReport]) -> float:
        """Heading of the target face: the rank-0 to rank-1 line turned -90 degrees."""
        delta = tracks[1].field_to_goal - tracks[0].field_to_goal
        return wrap_angle(math.atan2(delta[1], delta[0]) - math.pi / 2.0)

    def compute(
        self, field_to_vehicle: SE2, tracks: Sequence[TrackReport]
    ) -> AimingParameters | None:
        """Compute aiming parameters and update the cache.

        Args:
            field_to_vehicle: Latest vehicle pose
            tracks: Tracker output in rank order

        Returns:
            New parameters, or None (cache untouched) with too few tracks
        """
        if not self.has_enough_tracks(tracks):
            return None

        report = self.primary(tracks)
        robot_to_goal = np.asarray(report.field_to_goal) - field_to_vehicle.translation

        params = AimingParameters(
            range=float(np.linalg.norm(robot_to_goal)),
            robot_to_goal=math.atan2(robot_to_goal[1], robot_to_goal[0]),
            latest_timestamp=float(report.latest_timestamp),
            stability=float(report.stability),
            target_orientation=self.target_orientation(tracks),
        )
        self._cached = params
        return params
