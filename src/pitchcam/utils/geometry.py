"""Pitch geometry using Shapely - no custom geometry code"""
from shapely.geometry import MultiPoint, Point, Polygon, box
import numpy as np
from typing import Sequence, Tuple

from ..pitch.features import PITCH_LENGTH, PITCH_WIDTH


def create_pitch_polygon(length: float = PITCH_LENGTH, width: float = PITCH_WIDTH) -> Polygon:
    """Canonical pitch rectangle with the origin at the top-left corner"""
    return box(0.0, 0.0, length, width)


_PITCH = create_pitch_polygon()


def is_within_pitch(x: float, y: float, pitch: Polygon = _PITCH) -> bool:
    """Boundary-inclusive containment test (lines are part of the pitch)"""
    return pitch.covers(Point(x, y))


def get_pitch_zone(x: float, y: float) -> str:
    """Tactical zone name, e.g. 'Defensive Left' or 'Middle Central'"""
    third_length = PITCH_LENGTH / 3
    third_width = PITCH_WIDTH / 3

    if x < third_length:
        horizontal = 'Defensive'
    elif x < third_length * 2:
        horizontal = 'Middle'
    else:
        horizontal = 'Attacking'

    if y < third_width:
        vertical = 'Left'
    elif y < third_width * 2:
        vertical = 'Central'
    else:
        vertical = 'Right'

    return f"{horizontal} {vertical}"


def distance_from_goal(x: float, y: float, side: str = 'left') -> float:
    """Distance in metres from the centre of the chosen goal"""
    if side not in ('left', 'right'):
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")
    goal_x = 0.0 if side == 'left' else PITCH_LENGTH
    return Point(x, y).distance(Point(goal_x, PITCH_WIDTH / 2))


def is_degenerate_point_set(points: Sequence[Tuple[float, float]],
                            relative_tolerance: float = 1e-6) -> bool:
    """True when the points are coincident or collinear.

    The convex hull area is compared against the squared extent of the set so
    the test does not depend on whether the points are pixels or metres.
    """
    coords = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(coords) < 3 or not np.all(np.isfinite(coords)):
        return True

    hull = MultiPoint([tuple(p) for p in coords]).convex_hull
    min_x, min_y, max_x, max_y = hull.bounds
    extent = max(max_x - min_x, max_y - min_y)
    if extent == 0.0:
        return True

    return hull.area <= relative_tolerance * extent * extent
