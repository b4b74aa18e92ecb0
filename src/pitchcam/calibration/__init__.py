# src/pitchcam/calibration/__init__.py
"""Homography calibration: fit, validate, transform and persist."""

from .errors import CalibrationError, CalibrationFailure
from .homography import HomographyResult, HomographySolver, OpenCVHomographyEstimator, invert_homography
from .models import (
    Calibration,
    CorrespondencePoint,
    PitchCoord,
    ValidationMetrics,
    VideoCoord,
)
from .session import CalibrationOutcome, CalibrationSession
from .store import CalibrationStore
from .transformer import pitch_to_video, video_to_pitch
from .validator import CalibrationValidator

__all__ = [
    "CalibrationError", "CalibrationFailure",
    "HomographyResult", "HomographySolver", "OpenCVHomographyEstimator", "invert_homography",
    "Calibration", "CorrespondencePoint", "PitchCoord", "ValidationMetrics", "VideoCoord",
    "CalibrationOutcome", "CalibrationSession",
    "CalibrationStore",
    "pitch_to_video", "video_to_pitch",
    "CalibrationValidator",
]
