"""Data model for homography-based pitch calibration"""
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import numpy as np

from ..utils.geometry import is_within_pitch


def generate_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class VideoCoord:
    """Video coordinate (pixels)"""
    x: float
    y: float

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class PitchCoord:
    """Pitch coordinate (metres)"""
    x: float
    y: float

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass
class CorrespondencePoint:
    """Links a clicked video pixel to a known pitch location"""
    video: VideoCoord
    pitch: PitchCoord
    feature_name: str
    frame_number: int = 0
    id: str = field(default_factory=generate_id)
    timestamp: Optional[float] = None

    def is_on_pitch(self) -> bool:
        return is_within_pitch(self.pitch.x, self.pitch.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'video_coords': {'x': float(self.video.x), 'y': float(self.video.y)},
            'pitch_coords': {'X': float(self.pitch.x), 'Y': float(self.pitch.y)},
            'frame_number': int(self.frame_number),
            'feature_name': self.feature_name,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CorrespondencePoint':
        video = data['video_coords']
        pitch = data['pitch_coords']
        return cls(
            video=VideoCoord(float(video['x']), float(video['y'])),
            pitch=PitchCoord(float(pitch['X']), float(pitch['Y'])),
            feature_name=data['feature_name'],
            frame_number=int(data.get('frame_number', 0)),
            id=data.get('id') or generate_id(),
            timestamp=data.get('timestamp'),
        )


@dataclass(frozen=True)
class ValidationMetrics:
    """Reprojection accuracy of a homography over its correspondences"""
    mean_error_meters: float
    max_error_meters: float
    point_count: int
    is_valid: bool
    quality: str = 'poor'
    point_errors: Dict[str, float] = field(default_factory=dict)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mean_error': float(self.mean_error_meters),
            'max_error': float(self.max_error_meters),
            'point_count': int(self.point_count),
            'is_valid': bool(self.is_valid),
            'quality': self.quality,
            'point_errors': {k: float(v) for k, v in self.point_errors.items()},
            'message': self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ValidationMetrics':
        return cls(
            mean_error_meters=float(data['mean_error']),
            max_error_meters=float(data['max_error']),
            point_count=int(data['point_count']),
            is_valid=bool(data['is_valid']),
            quality=data.get('quality', 'poor'),
            point_errors=dict(data.get('point_errors', {})),
            message=data.get('message'),
        )


@dataclass
class Calibration:
    """Persisted calibration record, one per video"""
    video_id: str
    homography_matrix: np.ndarray   # pixel -> pitch
    inverse_matrix: np.ndarray      # pitch -> pixel
    points: List[CorrespondencePoint]
    metrics: ValidationMetrics
    id: str = field(default_factory=generate_id)
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'video_id': self.video_id,
            'homography_matrix': np.asarray(self.homography_matrix, dtype=np.float64).tolist(),
            'inverse_matrix': np.asarray(self.inverse_matrix, dtype=np.float64).tolist(),
            'calibration_points': [p.to_dict() for p in self.points],
            'validation_metrics': self.metrics.to_dict(),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Calibration':
        return cls(
            id=data['id'],
            video_id=data['video_id'],
            homography_matrix=np.array(data['homography_matrix'], dtype=np.float64),
            inverse_matrix=np.array(data['inverse_matrix'], dtype=np.float64),
            points=[CorrespondencePoint.from_dict(p) for p in data['calibration_points']],
            metrics=ValidationMetrics.from_dict(data['validation_metrics']),
            created_at=data['created_at'],
            updated_at=data['updated_at'],
        )
