"""Robust pixel -> pitch homography estimation using OpenCV RANSAC"""
import cv2
import numpy as np
from typing import Optional, Sequence, Tuple
import logging
from dataclasses import dataclass

from .errors import CalibrationError, CalibrationFailure
from .models import CorrespondencePoint
from ..utils.geometry import is_degenerate_point_set

MIN_HOMOGRAPHY_POINTS = 4
DEFAULT_RANSAC_THRESHOLD = 3.0  # pitch units (metres)
DEFAULT_SINGULAR_EPSILON = 1e-10

@dataclass
class HomographyResult:
    """Outcome of a homography fit or inversion"""
    matrix: Optional[np.ndarray]
    success: bool
    failure: Optional[CalibrationFailure] = None
    message: Optional[str] = None
    inlier_mask: Optional[np.ndarray] = None
    inlier_count: int = 0


class OpenCVHomographyEstimator:
    """RANSAC homography backed by cv2.findHomography"""

    def __init__(self, max_iterations: int = 2000, confidence: float = 0.995):
        self.max_iterations = max_iterations
        self.confidence = confidence

    def estimate(self, src: np.ndarray, dst: np.ndarray,
                 threshold: float) -> Tuple[Optional[np.ndarray], Optional[np.ndarray]]:
        """Return (H, inlier_mask); H is None when OpenCV finds no model"""
        H, mask = cv2.findHomography(
            src.reshape(-1, 1, 2).astype(np.float32),
            dst.reshape(-1, 1, 2).astype(np.float32),
            cv2.RANSAC,
            threshold,
            maxIters=self.max_iterations,
            confidence=self.confidence,
        )
        if H is None or H.size == 0:
            return None, None
        inliers = mask.ravel().astype(bool) if mask is not None else np.ones(len(src), dtype=bool)
        return np.asarray(H, dtype=np.float64), inliers


def _normalize(H: np.ndarray) -> np.ndarray:
    if abs(H[2, 2]) > DEFAULT_SINGULAR_EPSILON:
        return H / H[2, 2]
    return H


class HomographySolver:
    """Fit the video-pixel -> pitch-metre projective transform"""

    def __init__(self, estimator=None,
                 ransac_threshold: float = DEFAULT_RANSAC_THRESHOLD,
                 min_points: int = MIN_HOMOGRAPHY_POINTS):
        self.estimator = estimator if estimator is not None else OpenCVHomographyEstimator()
        self.ransac_threshold = ransac_threshold
        self.min_points = max(MIN_HOMOGRAPHY_POINTS, min_points)
        self.logger = logging.getLogger(__name__)

    def compute_homography(self, points: Sequence[CorrespondencePoint]) -> HomographyResult:
        """Compute H (pixel -> pitch) from at least four correspondences"""

        try:
            src, dst = self._prepare_points(points)
            H, inliers = self._fit(src, dst)
        except CalibrationError as e:
            self.logger.error(f"Homography computation failed: {e.message}")
            return HomographyResult(matrix=None, success=False,
                                    failure=e.failure, message=e.message)

        inlier_count = int(inliers.sum())
        outliers = [p.feature_name for p, ok in zip(points, inliers) if not ok]
        if outliers:
            self.logger.warning(f"RANSAC rejected {len(outliers)} correspondence(s): {', '.join(outliers)}")

        self.logger.info(f"Homography computed from {len(points)} points ({inlier_count} inliers)")
        return HomographyResult(matrix=H, success=True,
                                inlier_mask=inliers, inlier_count=inlier_count)

    def _prepare_points(self, points: Sequence[CorrespondencePoint]) -> Tuple[np.ndarray, np.ndarray]:
        if len(points) < self.min_points:
            raise CalibrationError(
                CalibrationFailure.INSUFFICIENT_POINTS,
                f"Need at least {self.min_points} points (have {len(points)})"
            )

        src = np.array([[p.video.x, p.video.y] for p in points], dtype=np.float64)
        dst = np.array([[p.pitch.x, p.pitch.y] for p in points], dtype=np.float64)

        if not (np.all(np.isfinite(src)) and np.all(np.isfinite(dst))):
            raise CalibrationError(CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED,
                                   "Correspondences contain NaN or Inf")

        if is_degenerate_point_set(src) or is_degenerate_point_set(dst):
            raise CalibrationError(CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED,
                                   "Points are collinear or coincident")

        return src, dst

    def _fit(self, src: np.ndarray, dst: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        try:
            H, inliers = self.estimator.estimate(src, dst, self.ransac_threshold)
        except cv2.error as e:
            raise CalibrationError(CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED,
                                   f"OpenCV error: {e}")

        if H is None:
            raise CalibrationError(CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED,
                                   "No consensus transform found. Try different points.")

        if H.shape != (3, 3) or not np.all(np.isfinite(H)):
            raise CalibrationError(CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED,
                                   f"Estimator returned an invalid matrix of shape {H.shape}")

        if inliers is None or int(inliers.sum()) < MIN_HOMOGRAPHY_POINTS:
            count = 0 if inliers is None else int(inliers.sum())
            raise CalibrationError(CalibrationFailure.HOMOGRAPHY_COMPUTATION_FAILED,
                                   f"Consensus set too small ({count} inliers)")

        return _normalize(H), inliers


def invert_homography(H, epsilon: float = DEFAULT_SINGULAR_EPSILON) -> HomographyResult:
    """Inverse (pitch -> pixel) transform; fails on a singular matrix"""

    logger = logging.getLogger(__name__)
    matrix = np.asarray(H, dtype=np.float64)

    if matrix.shape != (3, 3) or not np.all(np.isfinite(matrix)):
        message = f"Cannot invert: expected a finite 3x3 matrix, got shape {matrix.shape}"
        logger.error(message)
        return HomographyResult(matrix=None, success=False,
                                failure=CalibrationFailure.SINGULAR_MATRIX, message=message)

    det = float(np.linalg.det(matrix))
    if abs(det) < epsilon:
        message = f"Homography is singular (det={det:.3e})"
        logger.error(message)
        return HomographyResult(matrix=None, success=False,
                                failure=CalibrationFailure.SINGULAR_MATRIX, message=message)

    inverse = _normalize(np.linalg.inv(matrix))
    logger.debug(f"Inverse homography computed (det={det:.3e})")
    return HomographyResult(matrix=inverse, success=True)
