"""Vision side of the estimator: detections, projection and goal tracking."""

from .detection import TargetDetection
from .goal_tracker import GoalTrack, GoalTracker, GoalTrackerProtocol, TrackReport
from .projection import CameraMounting, VisionProjector

__all__ = [
    "TargetDetection",
    "CameraMounting",
    "VisionProjector",
    "GoalTrack",
    "GoalTracker",
    "GoalTrackerProtocol",
    "TrackReport",
]
