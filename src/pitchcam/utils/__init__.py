# src/pitchcam/utils/__init__.py
"""Utility functions, primarily for pitch geometry."""

from .geometry import (
    create_pitch_polygon,
    distance_from_goal,
    get_pitch_zone,
    is_degenerate_point_set,
    is_within_pitch,
)

__all__ = [
    "create_pitch_polygon", "distance_from_goal", "get_pitch_zone",
    "is_degenerate_point_set", "is_within_pitch",
]
