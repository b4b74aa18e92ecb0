# src/pitchcam/pitch/__init__.py
"""Pitch model: dimensions and named calibration features."""

from .features import (
    PITCH_DIMENSIONS,
    PITCH_FEATURES,
    PITCH_LENGTH,
    PITCH_WIDTH,
    PitchFeature,
    get_feature,
    list_feature_names,
)

__all__ = [
    "PITCH_DIMENSIONS", "PITCH_FEATURES", "PITCH_LENGTH", "PITCH_WIDTH",
    "PitchFeature", "get_feature", "list_feature_names",
]
