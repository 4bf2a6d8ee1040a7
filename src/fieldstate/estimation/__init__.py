"""Estimation components: pose history, aiming, correction and the estimator.

The estimator is the entry point; the other classes are exposed for
callers that need them on their own (e.g. offline replay tools).
"""

from .aiming import AimingParameters, AimingSynthesizer
from .correction import CorrectionResult, CorrectionStatus, compute_correction
from .pose_history import DEFAULT_CAPACITY, EmptyHistoryError, PoseHistory
from .state_estimator import EstimatorSnapshot, RobotStateEstimator

__all__ = [
    # Pose history
    "PoseHistory",
    "EmptyHistoryError",
    "DEFAULT_CAPACITY",
    # Aiming
    "AimingParameters",
    "AimingSynthesizer",
    # Correction
    "CorrectionResult",
    "CorrectionStatus",
    "compute_correction",
    # Estimator
    "RobotStateEstimator",
    "EstimatorSnapshot",
]
