"""Apply a homography (or its inverse) to single points.

These functions are stateless and are safe to call per mouse-move or per
tagged event. A point that maps to infinity (w close to 0) comes back as a
NaN coordinate instead of raising.
"""
import math

from .models import PitchCoord, VideoCoord

_W_EPSILON = 1e-12


def _apply(H, x: float, y: float):
    w = H[2][0] * x + H[2][1] * y + H[2][2]
    if not math.isfinite(w) or abs(w) < _W_EPSILON:
        return math.nan, math.nan
    u = (H[0][0] * x + H[0][1] * y + H[0][2]) / w
    v = (H[1][0] * x + H[1][1] * y + H[1][2]) / w
    return float(u), float(v)


def video_to_pitch(x: float, y: float, H) -> PitchCoord:
    """Map a video pixel to pitch metres with the forward homography"""
    X, Y = _apply(H, x, y)
    return PitchCoord(X, Y)


def pitch_to_video(X: float, Y: float, H_inv) -> VideoCoord:
    """Map pitch metres to a video pixel with the inverse homography"""
    x, y = _apply(H_inv, X, Y)
    return VideoCoord(x, y)
