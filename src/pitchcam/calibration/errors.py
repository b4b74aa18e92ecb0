from enum import Enum


class CalibrationFailure(Enum):
    """Failure kinds surfaced by the calibration components"""
    INSUFFICIENT_POINTS = "insufficient_points"
    HOMOGRAPHY_COMPUTATION_FAILED = "homography_computation_failed"
    SINGULAR_MATRIX = "singular_matrix"
    POSE_COMPUTATION_FAILED = "pose_computation_failed"
    VALIDATION_BELOW_THRESHOLD = "validation_below_threshold"
    # Reported by an external zoom/drift tracker; transforms are stale once it fires
    TRACKING_LOST = "tracking_lost"


class CalibrationError(ValueError):
    """Raised inside the solvers and converted to a failed result at the public boundary"""

    def __init__(self, failure: CalibrationFailure, message: str):
        super().__init__(message)
        self.failure = failure
        self.message = message
