# src/pitchcam/camera/__init__.py
"""Virtual camera model and pose solver."""

from .pose_solver import (
    DEFAULT_SEARCH_SCHEDULE,
    CameraPoseSolver,
    PoseCorrespondence,
    PoseSolution,
    SearchStage,
    correspondences_from_pixels,
)
from .projection import (
    DEFAULT_CAMERA,
    CameraParameters,
    PerspectiveCamera,
    ndc_to_pixels,
    pixels_to_ndc,
)

__all__ = [
    "DEFAULT_SEARCH_SCHEDULE", "CameraPoseSolver", "PoseCorrespondence",
    "PoseSolution", "SearchStage", "correspondences_from_pixels",
    "DEFAULT_CAMERA", "CameraParameters", "PerspectiveCamera",
    "ndc_to_pixels", "pixels_to_ndc",
]
