import math

import numpy as np
import pytest

from pitchcam.calibration import (
    CalibrationValidator,
    CorrespondencePoint,
    PitchCoord,
    VideoCoord,
    pitch_to_video,
    video_to_pitch,
)


def test_identity_transform():
    result = video_to_pitch(12.5, 40.0, np.eye(3))

    assert result == PitchCoord(12.5, 40.0)


def test_scaling_transform_accepts_nested_lists():
    H = [[0.1, 0.0, 0.0], [0.0, 0.1, 0.0], [0.0, 0.0, 1.0]]

    result = video_to_pitch(425.0, 300.0, H)

    assert result.x == pytest.approx(42.5)
    assert result.y == pytest.approx(30.0)


def test_pitch_to_video_uses_inverse():
    H_inv = np.array([[10.0, 0.0, 5.0], [0.0, 10.0, 7.0], [0.0, 0.0, 1.0]])

    result = pitch_to_video(1.0, 2.0, H_inv)

    assert result == VideoCoord(15.0, 27.0)


def test_point_at_infinity_returns_nan_sentinel():
    H = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 0.0, 0.0]])

    result = video_to_pitch(0.0, 5.0, H)

    assert math.isnan(result.x) and math.isnan(result.y)
    assert not result.is_finite()
    assert not pitch_to_video(0.0, 5.0, H).is_finite()


def _offset_points(offset):
    corners = [(10.0, 10.0), (50.0, 10.0), (50.0, 50.0), (10.0, 50.0)]
    return [
        CorrespondencePoint(VideoCoord(x + offset, y), PitchCoord(x, y), f"corner_{i}")
        for i, (x, y) in enumerate(corners)
    ]


def test_validity_just_below_threshold():
    metrics = CalibrationValidator().validate(_offset_points(1.99), np.eye(3))

    assert metrics.mean_error_meters == pytest.approx(1.99)
    assert metrics.is_valid
    assert metrics.message is None


def test_validity_just_above_threshold():
    metrics = CalibrationValidator().validate(_offset_points(2.01), np.eye(3))

    assert metrics.mean_error_meters == pytest.approx(2.01)
    assert not metrics.is_valid
    assert metrics.quality == 'poor'
    assert "High calibration error" in metrics.message


def test_threshold_is_configurable():
    validator = CalibrationValidator(max_mean_error=0.5)

    assert not validator.validate(_offset_points(0.6), np.eye(3)).is_valid
    assert validator.validate(_offset_points(0.4), np.eye(3)).is_valid


def test_mean_and_max_error():
    points = _offset_points(0.0)
    points[0].video = VideoCoord(13.0, 14.0)  # 5 m off

    metrics = CalibrationValidator().validate(points, np.eye(3))

    assert metrics.point_count == 4
    assert metrics.max_error_meters == pytest.approx(5.0)
    assert metrics.mean_error_meters == pytest.approx(1.25)
    assert metrics.point_errors['corner_0'] == pytest.approx(5.0)


@pytest.mark.parametrize("offset, quality", [
    (0.2, 'excellent'),
    (0.8, 'good'),
    (1.5, 'fair'),
    (3.0, 'poor'),
])
def test_quality_grades(offset, quality):
    assert CalibrationValidator().validate(_offset_points(offset), np.eye(3)).quality == quality


def test_threshold_error_is_graded_poor_and_invalid():
    metrics = CalibrationValidator().validate(_offset_points(2.0), np.eye(3))

    assert metrics.mean_error_meters == 2.0
    assert not metrics.is_valid
    assert metrics.quality == 'poor'


def test_empty_point_list_is_invalid():
    metrics = CalibrationValidator().validate([], np.eye(3))

    assert metrics.point_count == 0
    assert not metrics.is_valid
    assert math.isnan(metrics.mean_error_meters)


def test_validation_is_deterministic():
    validator = CalibrationValidator()
    points = _offset_points(0.7)

    assert validator.validate(points, np.eye(3)) == validator.validate(points, np.eye(3))
