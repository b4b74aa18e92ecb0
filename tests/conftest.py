"""Shared fixtures: a synthetic broadcast homography and a synthetic camera."""
import numpy as np
import pytest

from pitchcam.calibration.models import CorrespondencePoint, PitchCoord, VideoCoord
from pitchcam.camera.pose_solver import PoseCorrespondence, SearchStage
from pitchcam.camera.projection import CameraParameters, PerspectiveCamera
from pitchcam.pitch.features import PITCH_FEATURES

# Pitch metres -> video pixels for a main-stand style view of the whole pitch
PITCH_TO_VIDEO = np.array([
    [11.0, 3.0, 120.0],
    [0.2, 7.5, 150.0],
    [0.0004, 0.004, 1.0],
])


def project_pitch_point(X, Y, H=PITCH_TO_VIDEO):
    w = H[2, 0] * X + H[2, 1] * Y + H[2, 2]
    return ((H[0, 0] * X + H[0, 1] * Y + H[0, 2]) / w,
            (H[1, 0] * X + H[1, 1] * Y + H[1, 2]) / w)


@pytest.fixture
def make_points():
    """Build exact correspondences for named features under PITCH_TO_VIDEO"""

    def _make(feature_names, offsets=None):
        offsets = offsets or {}
        points = []
        for frame, name in enumerate(feature_names):
            feature = PITCH_FEATURES[name]
            x, y = project_pitch_point(feature.x, feature.y)
            dx, dy = offsets.get(name, (0.0, 0.0))
            points.append(CorrespondencePoint(
                video=VideoCoord(x + dx, y + dy),
                pitch=PitchCoord(feature.x, feature.y),
                feature_name=name,
                frame_number=frame,
            ))
        return points

    return _make


@pytest.fixture
def corner_features():
    return ['top_left_corner', 'top_right_corner', 'bottom_right_corner', 'bottom_left_corner']


@pytest.fixture
def many_features():
    return [
        'top_left_corner', 'top_right_corner', 'bottom_right_corner', 'bottom_left_corner',
        'center_spot', 'left_penalty_top', 'right_penalty_bottom', 'left_goal_area_bl',
        'center_line_top',
    ]


TRUE_CAMERA = CameraParameters(x=0.0, y=25.0, z=50.0,
                               rotation_x=-0.3, rotation_y=0.0, field_of_view=45.0)
ASPECT_RATIO = 16 / 9

# Points on the pitch plane (y=0) inside the true camera's view
WORLD_POINTS = [
    (-30.0, 0.0, -30.0), (30.0, 0.0, -30.0), (-20.0, 0.0, 10.0), (20.0, 0.0, 10.0),
    (0.0, 0.0, -10.0), (-10.0, 0.0, 0.0), (15.0, 0.0, -20.0), (0.0, 0.0, 15.0),
]


@pytest.fixture
def true_camera():
    return TRUE_CAMERA


@pytest.fixture
def pose_correspondences():
    camera = PerspectiveCamera(ASPECT_RATIO)
    screen = camera.project(np.array(WORLD_POINTS), TRUE_CAMERA.as_vector())
    return [PoseCorrespondence(world=w, screen=(float(s[0]), float(s[1])))
            for w, s in zip(WORLD_POINTS, screen)]


@pytest.fixture
def aspect_ratio():
    return ASPECT_RATIO


@pytest.fixture
def short_schedule():
    return [
        SearchStage('coarse', 100, 1.0, 0.05, 1.0),
        SearchStage('fine', 100, 0.1, 0.005, 0.1),
    ]
