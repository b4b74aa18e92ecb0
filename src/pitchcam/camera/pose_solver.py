import math
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple
import logging
from dataclasses import dataclass, field

from .projection import CameraParameters, DEFAULT_CAMERA, PerspectiveCamera, pixels_to_ndc
from ..calibration.errors import CalibrationError, CalibrationFailure

MIN_POSE_POINTS = 4

# Indices into the solved vector [x, y, z, rotation_x, rotation_y, field_of_view]
_HEIGHT = 1
_FOV = 5

@dataclass(frozen=True)
class SearchStage:
    """One pass of the random local search; steps are half-widths of the uniform delta"""
    name: str
    iterations: int
    position_step: float
    rotation_step: float
    fov_step: float


DEFAULT_SEARCH_SCHEDULE: Tuple[SearchStage, ...] = (
    SearchStage('coarse', 1000, position_step=1.0, rotation_step=0.05, fov_step=1.0),
    SearchStage('refine', 2000, position_step=0.25, rotation_step=0.01, fov_step=0.25),
    SearchStage('fine', 2000, position_step=0.025, rotation_step=0.0025, fov_step=0.05),
)

@dataclass
class PoseCorrespondence:
    """Known world point and where it appears on screen (NDC, y up)"""
    world: Tuple[float, float, float]
    screen: Tuple[float, float]

    @classmethod
    def from_pixels(cls, world: Tuple[float, float, float], pixel: Tuple[float, float],
                    width: float, height: float) -> 'PoseCorrespondence':
        return cls(world=tuple(world), screen=pixels_to_ndc(pixel[0], pixel[1], width, height))

@dataclass
class PoseSolution:
    """Best camera found by the solver and its reprojection error (squared NDC)"""
    parameters: Optional[CameraParameters]
    error: float
    success: bool
    initial_error: float = math.inf
    stage_errors: Dict[str, float] = field(default_factory=dict)
    accepted_moves: int = 0
    failure: Optional[CalibrationFailure] = None
    message: Optional[str] = None


class CameraPoseSolver:
    """Recover camera position, pitch/yaw and field of view from 2D-3D correspondences.

    Derivative-free hill climbing: each iteration perturbs one of the six
    parameters by a uniform random delta and keeps the candidate only if the
    mean squared reprojection error improves. Stages shrink the step sizes
    from coarse exploration to fine tuning.

    Pass ``rng`` (a ``numpy.random.Generator``) or ``seed`` for reproducible
    solves; otherwise a fresh unseeded generator is used.
    """

    def __init__(self, schedule: Sequence[SearchStage] = DEFAULT_SEARCH_SCHEDULE,
                 min_height: float = 5.0,
                 fov_limits: Tuple[float, float] = (10.0, 120.0),
                 min_points: int = MIN_POSE_POINTS,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        self.schedule = tuple(schedule)
        self.min_height = min_height
        self.fov_limits = fov_limits
        self.min_points = min_points
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.logger = logging.getLogger(__name__)

    def solve_pose(self, correspondences: Sequence[PoseCorrespondence], aspect_ratio: float,
                   initial_guess: Optional[CameraParameters] = None) -> PoseSolution:
        """Run the full staged search and return the best parameters found"""

        camera = PerspectiveCamera(aspect_ratio)

        try:
            world, screen = self._prepare_observations(correspondences)
        except CalibrationError as e:
            self.logger.error(f"Camera pose solve refused: {e.message}")
            return PoseSolution(parameters=None, error=math.inf, success=False,
                                failure=e.failure, message=e.message)

        start = initial_guess if initial_guess is not None else DEFAULT_CAMERA
        best_params = self._clamp(start.as_vector())
        best_error = camera.mean_squared_error(world, screen, best_params)
        initial_error = best_error

        self.logger.info(f"Solving camera pose from {len(world)} correspondences "
                         f"(initial error {initial_error:.6f})")

        stage_errors: Dict[str, float] = {}
        accepted = 0
        for stage in self.schedule:
            steps = np.array([stage.position_step] * 3 + [stage.rotation_step] * 2 + [stage.fov_step])

            for _ in range(stage.iterations):
                candidate = best_params.copy()
                idx = int(self.rng.integers(6))
                candidate[idx] += self.rng.uniform(-steps[idx], steps[idx])
                candidate = self._clamp(candidate)

                error = camera.mean_squared_error(world, screen, candidate)
                if error < best_error:
                    best_error = error
                    best_params = candidate
                    accepted += 1

            stage_errors[stage.name] = best_error
            self.logger.debug(f"Stage '{stage.name}' finished: error {best_error:.6f}")

        parameters = CameraParameters.from_vector(best_params)
        self.logger.info(f"Camera pose solved: error {best_error:.6f} "
                         f"({accepted} accepted moves), fov {parameters.field_of_view:.1f}")

        return PoseSolution(
            parameters=parameters,
            error=best_error,
            success=True,
            initial_error=initial_error,
            stage_errors=stage_errors,
            accepted_moves=accepted
        )

    def reprojection_error(self, correspondences: Sequence[PoseCorrespondence], aspect_ratio: float,
                           parameters: CameraParameters) -> float:
        """Mean squared NDC error of a parameter set, as used by the search"""
        world, screen = self._to_arrays(correspondences)
        camera = PerspectiveCamera(aspect_ratio)
        return camera.mean_squared_error(world, screen, parameters.as_vector())

    def _prepare_observations(self, correspondences: Sequence[PoseCorrespondence]) -> Tuple[np.ndarray, np.ndarray]:
        if len(correspondences) < self.min_points:
            raise CalibrationError(
                CalibrationFailure.INSUFFICIENT_POINTS,
                f"Need at least {self.min_points} correspondences (have {len(correspondences)})"
            )
        world, screen = self._to_arrays(correspondences)
        if not (np.all(np.isfinite(world)) and np.all(np.isfinite(screen))):
            raise CalibrationError(
                CalibrationFailure.POSE_COMPUTATION_FAILED,
                "Correspondences contain NaN or Inf"
            )
        return world, screen

    @staticmethod
    def _to_arrays(correspondences: Sequence[PoseCorrespondence]) -> Tuple[np.ndarray, np.ndarray]:
        world = np.array([c.world for c in correspondences], dtype=np.float64).reshape(-1, 3)
        screen = np.array([c.screen for c in correspondences], dtype=np.float64).reshape(-1, 2)
        return world, screen

    def _clamp(self, params: np.ndarray) -> np.ndarray:
        params = np.array(params, dtype=np.float64)
        params[_HEIGHT] = max(params[_HEIGHT], self.min_height)
        params[_FOV] = min(max(params[_FOV], self.fov_limits[0]), self.fov_limits[1])
        return params


def correspondences_from_pixels(points: List[Tuple[Tuple[float, float, float], Tuple[float, float]]],
                                width: float, height: float) -> List[PoseCorrespondence]:
    """Build correspondences from (world, pixel) pairs clicked on a width x height viewport"""
    return [PoseCorrespondence.from_pixels(world, pixel, width, height) for world, pixel in points]
