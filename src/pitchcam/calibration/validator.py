import math
import numpy as np
from typing import Dict, Sequence
import logging

from .models import CorrespondencePoint, ValidationMetrics
from .transformer import video_to_pitch

DEFAULT_MAX_MEAN_ERROR = 2.0  # metres, good enough for tactical analysis


class CalibrationValidator:
    """Reprojection accuracy of a pixel -> pitch homography"""

    def __init__(self, max_mean_error: float = DEFAULT_MAX_MEAN_ERROR):
        self.max_mean_error = max_mean_error
        self.logger = logging.getLogger(__name__)

        # Exclusive upper bound (metres) of mean error for each grade
        self.quality_thresholds = {
            'excellent': 0.5,
            'good': 1.0,
            'fair': 2.0,
            'poor': float('inf')
        }

    def validate(self, points: Sequence[CorrespondencePoint], H) -> ValidationMetrics:
        """Reproject every video point through H and measure the error in metres"""

        if not points:
            self.logger.warning("No calibration points to validate")
            return ValidationMetrics(
                mean_error_meters=math.nan,
                max_error_meters=math.nan,
                point_count=0,
                is_valid=False,
                message="No calibration points to validate"
            )

        point_errors: Dict[str, float] = {}
        errors = []
        for point in points:
            predicted = video_to_pitch(point.video.x, point.video.y, H)
            error = math.hypot(predicted.x - point.pitch.x, predicted.y - point.pitch.y)
            errors.append(error)
            point_errors[point.feature_name] = error

        mean_error = float(np.mean(errors))
        max_error = float(np.max(errors))
        is_valid = mean_error < self.max_mean_error
        quality = self._determine_quality(mean_error)

        message = None
        if not is_valid:
            message = (f"Warning: High calibration error ({mean_error:.2f}m). "
                       f"Consider adding more points.")
            self.logger.warning(message)
        else:
            self.logger.info(f"Calibration validated: mean {mean_error:.3f}m, "
                             f"max {max_error:.3f}m over {len(points)} points ({quality})")

        return ValidationMetrics(
            mean_error_meters=mean_error,
            max_error_meters=max_error,
            point_count=len(points),
            is_valid=is_valid,
            quality=quality,
            point_errors=point_errors,
            message=message
        )

    def _determine_quality(self, mean_error: float) -> str:
        for quality, threshold in self.quality_thresholds.items():
            if mean_error < threshold:
                return quality
        return 'poor'
