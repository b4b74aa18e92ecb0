# src/pitchcam/__init__.py
"""
Football Pitch Camera Calibration Package

This package aligns broadcast football footage with the pitch: a robust
homography maps video pixels to pitch metres (and back), and a camera pose
solver recovers a virtual camera's position, rotation and field of view from
the same kind of point correspondences.
"""

# Calibration
from .calibration import (
    Calibration,
    CalibrationError,
    CalibrationFailure,
    CalibrationOutcome,
    CalibrationSession,
    CalibrationStore,
    CalibrationValidator,
    CorrespondencePoint,
    HomographyResult,
    HomographySolver,
    OpenCVHomographyEstimator,
    PitchCoord,
    ValidationMetrics,
    VideoCoord,
    invert_homography,
    pitch_to_video,
    video_to_pitch,
)

# Camera
from .camera import (
    DEFAULT_CAMERA,
    CameraParameters,
    CameraPoseSolver,
    PerspectiveCamera,
    PoseCorrespondence,
    PoseSolution,
    SearchStage,
)

# Config
from .config import CalibrationConfig, CalibrationConfigurationManager

# Pitch
from .pitch import PITCH_FEATURES, PitchFeature

# Utils
from .utils import (
    distance_from_goal,
    get_pitch_zone,
    is_within_pitch,
)

__all__ = [
    # Calibration
    "Calibration", "CalibrationError", "CalibrationFailure", "CalibrationOutcome",
    "CalibrationSession", "CalibrationStore", "CalibrationValidator",
    "CorrespondencePoint", "HomographyResult", "HomographySolver",
    "OpenCVHomographyEstimator", "PitchCoord", "ValidationMetrics", "VideoCoord",
    "invert_homography", "pitch_to_video", "video_to_pitch",
    # Camera
    "DEFAULT_CAMERA", "CameraParameters", "CameraPoseSolver", "PerspectiveCamera",
    "PoseCorrespondence", "PoseSolution", "SearchStage",
    # Config
    "CalibrationConfig", "CalibrationConfigurationManager",
    # Pitch
    "PITCH_FEATURES", "PitchFeature",
    # Utils
    "distance_from_goal", "get_pitch_zone", "is_within_pitch",
]
