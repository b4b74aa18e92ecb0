import cv2
import numpy as np
import pytest

from pitchcam.calibration import (
    CalibrationFailure,
    CalibrationValidator,
    CorrespondencePoint,
    HomographySolver,
    PitchCoord,
    VideoCoord,
    invert_homography,
    pitch_to_video,
    video_to_pitch,
)


def test_four_exact_points_fit_with_zero_error(make_points, corner_features):
    points = make_points(corner_features)

    result = HomographySolver().compute_homography(points)

    assert result.success
    assert result.matrix.shape == (3, 3)
    assert result.inlier_count == 4
    metrics = CalibrationValidator().validate(points, result.matrix)
    assert metrics.mean_error_meters < 1e-3
    assert metrics.max_error_meters < 1e-3
    assert metrics.is_valid


def test_matrix_is_normalized(make_points, many_features):
    result = HomographySolver().compute_homography(make_points(many_features))

    assert result.matrix[2, 2] == pytest.approx(1.0)


def test_round_trip_through_inverse(make_points, many_features):
    points = make_points(many_features)
    H = HomographySolver().compute_homography(points).matrix
    H_inv = invert_homography(H)
    assert H_inv.success

    samples = [(p.video.x, p.video.y) for p in points]
    # Interior points between the clicked features
    a, b, c = samples[0], samples[2], samples[4]
    samples += [((a[0] + b[0]) / 2, (a[1] + b[1]) / 2),
                ((a[0] + c[0]) / 2, (a[1] + c[1]) / 2),
                ((b[0] * 0.3 + c[0] * 0.7), (b[1] * 0.3 + c[1] * 0.7))]

    for x, y in samples:
        pitch = video_to_pitch(x, y, H)
        back = pitch_to_video(pitch.x, pitch.y, H_inv.matrix)
        assert back.x == pytest.approx(x, abs=1e-6)
        assert back.y == pytest.approx(y, abs=1e-6)


def test_fewer_than_four_points_fails(make_points, corner_features):
    result = HomographySolver().compute_homography(make_points(corner_features[:3]))

    assert not result.success
    assert result.matrix is None
    assert result.failure == CalibrationFailure.INSUFFICIENT_POINTS


def test_empty_point_list_fails():
    result = HomographySolver().compute_homography([])

    assert result.failure == CalibrationFailure.INSUFFICIENT_POINTS


def test_collinear_points_fail():
    # Four points along the top touchline
    points = [
        CorrespondencePoint(VideoCoord(100.0 + 50 * i, 200.0 + 3 * i * i), PitchCoord(25.0 * i, 0.0), f"p{i}")
        for i in range(4)
    ]

    result = HomographySolver().compute_homography(points)

    assert not result.success
    assert result.matrix is None
    assert result.failure == CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED


def test_collinear_video_pixels_fail(make_points, corner_features):
    points = make_points(corner_features)
    for i, point in enumerate(points):
        point.video = VideoCoord(100.0 + 10 * i, 100.0 + 10 * i)

    result = HomographySolver().compute_homography(points)

    assert result.failure == CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED


def test_ransac_rejects_misclicked_point(make_points, many_features):
    points = make_points(many_features, offsets={'center_spot': (180.0, -120.0)})

    result = HomographySolver().compute_homography(points)

    assert result.success
    assert result.inlier_count == len(points) - 1
    assert not result.inlier_mask[many_features.index('center_spot')]

    metrics = CalibrationValidator().validate(points, result.matrix)
    assert metrics.point_errors['top_left_corner'] < 1e-2
    assert metrics.point_errors['center_spot'] > 3.0


class _NoModelEstimator:
    def estimate(self, src, dst, threshold):
        return None, None


class _FailingEstimator:
    def estimate(self, src, dst, threshold):
        raise cv2.error("estimator blew up")


class _SmallConsensusEstimator:
    def estimate(self, src, dst, threshold):
        mask = np.zeros(len(src), dtype=bool)
        mask[:3] = True
        return np.eye(3), mask


@pytest.mark.parametrize("estimator", [_NoModelEstimator(), _FailingEstimator(), _SmallConsensusEstimator()])
def test_estimator_failures_surface_as_failed_result(estimator, make_points, many_features):
    solver = HomographySolver(estimator=estimator)

    result = solver.compute_homography(make_points(many_features))

    assert not result.success
    assert result.matrix is None
    assert result.failure == CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED


def test_threshold_is_passed_to_estimator(make_points, many_features):
    seen = {}

    class Recording:
        def estimate(self, src, dst, threshold):
            seen['threshold'] = threshold
            return np.eye(3), np.ones(len(src), dtype=bool)

    HomographySolver(estimator=Recording(), ransac_threshold=1.5).compute_homography(
        make_points(many_features))

    assert seen['threshold'] == 1.5


def test_invert_identity():
    result = invert_homography(np.eye(3))

    assert result.success
    np.testing.assert_allclose(result.matrix, np.eye(3))


@pytest.mark.parametrize("matrix", [
    np.zeros((3, 3)),
    np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [0.0, 0.0, 1.0]]),
    np.full((3, 3), np.nan),
    np.eye(2),
])
def test_invert_rejects_singular_matrix(matrix):
    result = invert_homography(matrix)

    assert not result.success
    assert result.matrix is None
    assert result.failure == CalibrationFailure.SINGULAR_MATRIX


def test_inverse_is_normalized(make_points, many_features):
    H = HomographySolver().compute_homography(make_points(many_features)).matrix

    H_inv = invert_homography(H).matrix

    assert H_inv[2, 2] == pytest.approx(1.0)
    np.testing.assert_allclose(H @ H_inv / (H @ H_inv)[2, 2], np.eye(3), atol=1e-9)
