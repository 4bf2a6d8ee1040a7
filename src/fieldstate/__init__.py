"""fieldstate - robot field-state estimation from odometry and vision targets."""

__version__ = "0.1.0"

# Re-export main classes for convenient imports
from .config import CameraConfig, EstimatorConfig, TrackerConfig
from .geometry import SE2
from .estimation import (
    AimingParameters,
    AimingSynthesizer,
    CorrectionResult,
    CorrectionStatus,
    EmptyHistoryError,
    EstimatorSnapshot,
    PoseHistory,
    RobotStateEstimator,
)
from .vision import (
    CameraMounting,
    GoalTracker,
    GoalTrackerProtocol,
    TargetDetection,
    TrackReport,
    VisionProjector,
)
from .visualization import EstimatorVisualizer

__all__ = [
    "__version__",
    # Configuration
    "EstimatorConfig",
    "CameraConfig",
    "TrackerConfig",
    # Geometry
    "SE2",
    # Estimator
    "RobotStateEstimator",
    "EstimatorSnapshot",
    "PoseHistory",
    "EmptyHistoryError",
    # Aiming / correction
    "AimingParameters",
    "AimingSynthesizer",
    "CorrectionResult",
    "CorrectionStatus",
    # Vision
    "TargetDetection",
    "CameraMounting",
    "VisionProjector",
    "GoalTracker",
    "GoalTrackerProtocol",
    "TrackReport",
    # Visualization
    "EstimatorVisualizer",
]
