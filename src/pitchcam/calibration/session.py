"""Interactive calibration session: collect clicked points, compute and persist"""
from dataclasses import dataclass
from typing import List, Optional
import logging

from .errors import CalibrationFailure
from .homography import HomographySolver, invert_homography
from .models import Calibration, CorrespondencePoint, PitchCoord, VideoCoord, generate_id, utc_now
from .store import CalibrationStore
from .transformer import pitch_to_video, video_to_pitch
from .validator import CalibrationValidator
from ..pitch.features import get_feature

@dataclass
class CalibrationOutcome:
    """Result of CalibrationSession.compute"""
    success: bool
    calibration: Optional[Calibration] = None
    failure: Optional[CalibrationFailure] = None
    message: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.calibration is not None and self.calibration.metrics.is_valid


class CalibrationSession:
    """Point-correspondence workflow for a single video.

    Points are keyed by pitch feature: clicking a feature that already has a
    point moves that point instead of adding a second one. Any change to the
    point set drops the current transform, so a stale matrix is never used.
    """

    def __init__(self, video_id: str,
                 solver: Optional[HomographySolver] = None,
                 validator: Optional[CalibrationValidator] = None,
                 singular_epsilon: float = 1e-10):
        self.video_id = video_id
        self.solver = solver if solver is not None else HomographySolver()
        self.validator = validator if validator is not None else CalibrationValidator()
        self.singular_epsilon = singular_epsilon
        self.logger = logging.getLogger(__name__)

        self.points: List[CorrespondencePoint] = []
        self.selected_feature: Optional[str] = None
        self.calibration: Optional[Calibration] = None
        self._record_id: Optional[str] = None
        self._created_at: Optional[str] = None

    @property
    def is_calibrated(self) -> bool:
        return self.calibration is not None

    def select_feature(self, feature_name: Optional[str]) -> None:
        if feature_name is not None:
            get_feature(feature_name)
        self.selected_feature = feature_name

    def add_point(self, video_x: float, video_y: float, frame_number: int = 0,
                  feature_name: Optional[str] = None) -> CorrespondencePoint:
        """Attach a clicked pixel to the given (or currently selected) feature"""

        name = feature_name or self.selected_feature
        if name is None:
            raise ValueError("Please select a pitch feature first")
        feature = get_feature(name)

        existing = self._find_by_feature(name)
        if existing is not None:
            existing.video = VideoCoord(float(video_x), float(video_y))
            existing.frame_number = frame_number
            point = existing
            self.logger.debug(f"Moved point for '{name}' to ({video_x:.1f}, {video_y:.1f})")
        else:
            point = CorrespondencePoint(
                video=VideoCoord(float(video_x), float(video_y)),
                pitch=PitchCoord(feature.x, feature.y),
                feature_name=name,
                frame_number=frame_number,
            )
            self.points.append(point)
            self.logger.debug(f"Added point for '{name}' at ({video_x:.1f}, {video_y:.1f})")

        self.selected_feature = None
        self._invalidate()
        return point

    def remove_point(self, point_id: str) -> bool:
        remaining = [p for p in self.points if p.id != point_id]
        removed = len(remaining) != len(self.points)
        if removed:
            self.points = remaining
            self._invalidate()
        return removed

    def clear(self) -> None:
        """Drop all points and the current calibration"""
        self.points = []
        self.selected_feature = None
        self.calibration = None
        self._record_id = None
        self._created_at = None

    def compute(self) -> CalibrationOutcome:
        """Fit H, derive H^-1 and validate; replaces any previous calibration"""

        fit = self.solver.compute_homography(self.points)
        if not fit.success:
            return CalibrationOutcome(success=False, failure=fit.failure, message=fit.message)

        inverse = invert_homography(fit.matrix, self.singular_epsilon)
        if not inverse.success:
            return CalibrationOutcome(success=False, failure=inverse.failure, message=inverse.message)

        metrics = self.validator.validate(self.points, fit.matrix)
        points = [CorrespondencePoint.from_dict(p.to_dict()) for p in self.points]

        now = utc_now()
        self.calibration = Calibration(
            id=self._record_id or generate_id(),
            video_id=self.video_id,
            homography_matrix=fit.matrix,
            inverse_matrix=inverse.matrix,
            points=points,
            metrics=metrics,
            created_at=self._created_at or now,
            updated_at=now,
        )
        self._record_id = self.calibration.id
        self._created_at = self.calibration.created_at

        self.logger.info(f"Calibration computed for video '{self.video_id}': "
                         f"mean error {metrics.mean_error_meters:.3f}m")

        failure = None if metrics.is_valid else CalibrationFailure.VALIDATION_BELOW_THRESHOLD
        return CalibrationOutcome(success=True, calibration=self.calibration,
                                  failure=failure, message=metrics.message)

    def video_to_pitch(self, x: float, y: float) -> Optional[PitchCoord]:
        if self.calibration is None:
            return None
        return video_to_pitch(x, y, self.calibration.homography_matrix)

    def pitch_to_video(self, x: float, y: float) -> Optional[VideoCoord]:
        if self.calibration is None:
            return None
        return pitch_to_video(x, y, self.calibration.inverse_matrix)

    def save(self, store: CalibrationStore) -> bool:
        if self.calibration is None:
            self.logger.warning("No calibration to save")
            return False
        store.save(self.calibration)
        return True

    def load(self, store: CalibrationStore) -> bool:
        calibration = store.load(self.video_id)
        if calibration is None:
            return False
        self.calibration = calibration
        self._record_id = calibration.id
        self._created_at = calibration.created_at
        self.points = [CorrespondencePoint.from_dict(p.to_dict()) for p in calibration.points]
        return True

    def reset(self, store: Optional[CalibrationStore] = None) -> None:
        """Clear the session and delete the persisted record"""
        self.clear()
        if store is not None:
            store.delete(self.video_id)

    def _find_by_feature(self, feature_name: str) -> Optional[CorrespondencePoint]:
        for point in self.points:
            if point.feature_name == feature_name:
                return point
        return None

    def _invalidate(self) -> None:
        # The record id survives so the next compute replaces the same record
        self.calibration = None
