import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, asdict, field
import logging

from .calibration.homography import HomographySolver
from .calibration.validator import CalibrationValidator
from .camera.pose_solver import CameraPoseSolver, DEFAULT_SEARCH_SCHEDULE, SearchStage

@dataclass
class CalibrationConfig:
    """Tunable tolerances for the homography and camera pose solvers"""
    # Homography
    ransac_threshold: float = 3.0      # inlier distance in pitch units
    max_mean_error: float = 2.0        # metres; validity cut-off
    singular_epsilon: float = 1e-10
    min_points: int = 4

    # Camera pose
    min_camera_height: float = 5.0
    min_field_of_view: float = 10.0
    max_field_of_view: float = 120.0
    search_schedule: List[SearchStage] = field(default_factory=lambda: list(DEFAULT_SEARCH_SCHEDULE))
    seed: Optional[int] = None

    @property
    def fov_limits(self) -> Tuple[float, float]:
        return self.min_field_of_view, self.max_field_of_view


class CalibrationConfigurationManager:
    """Manage calibration configurations and presets"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def create_default_config() -> CalibrationConfig:
        return CalibrationConfig()

    @staticmethod
    def create_strict_config() -> CalibrationConfig:
        """Tighter tolerances for analysis that needs sub-metre accuracy"""
        return CalibrationConfig(
            ransac_threshold=1.0,
            max_mean_error=0.5
        )

    @staticmethod
    def create_fast_config() -> CalibrationConfig:
        """Half the pose search budget, for interactive previews"""
        return CalibrationConfig(
            search_schedule=[
                SearchStage(stage.name, stage.iterations // 2,
                            stage.position_step, stage.rotation_step, stage.fov_step)
                for stage in DEFAULT_SEARCH_SCHEDULE
            ]
        )

    def create_preset(self, name: str) -> CalibrationConfig:
        presets = {
            'default': self.create_default_config,
            'strict': self.create_strict_config,
            'fast': self.create_fast_config,
        }
        if name not in presets:
            self.logger.warning(f"Preset '{name}' not available. Using 'default'.")
            name = 'default'
        return presets[name]()

    def validate_configuration(self, config: CalibrationConfig) -> List[str]:
        """Validate configuration and return list of issues"""

        issues = []

        if config.ransac_threshold <= 0:
            issues.append("ransac_threshold must be positive")

        if config.max_mean_error <= 0:
            issues.append("max_mean_error must be positive")

        if config.singular_epsilon <= 0:
            issues.append("singular_epsilon must be positive")

        if config.min_points < 4:
            issues.append("min_points should be at least 4")

        if config.min_field_of_view <= 0 or config.max_field_of_view >= 180:
            issues.append("field of view limits must lie within (0, 180) degrees")

        if config.min_field_of_view > config.max_field_of_view:
            issues.append("min_field_of_view cannot be greater than max_field_of_view")

        if not config.search_schedule:
            issues.append("search_schedule must contain at least one stage")

        for stage in config.search_schedule:
            if stage.iterations < 0:
                issues.append(f"Stage '{stage.name}': iterations cannot be negative")
            if min(stage.position_step, stage.rotation_step, stage.fov_step) < 0:
                issues.append(f"Stage '{stage.name}': step sizes cannot be negative")

        return issues

    def save_configuration(self, config: CalibrationConfig, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(asdict(config), f, indent=2)
        self.logger.info(f"Configuration saved to: {output_path}")

    def load_configuration(self, input_path: Path) -> CalibrationConfig:
        """Load a configuration; missing keys fall back to defaults"""

        with open(input_path, 'r') as f:
            data: Dict[str, Any] = json.load(f)

        known = set(CalibrationConfig.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            self.logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")

        values = {key: value for key, value in data.items() if key in known}
        if 'search_schedule' in values:
            values['search_schedule'] = [SearchStage(**stage) for stage in values['search_schedule']]

        self.logger.info(f"Configuration loaded from: {input_path}")
        return CalibrationConfig(**values)

    @staticmethod
    def build_homography_solver(config: CalibrationConfig) -> HomographySolver:
        return HomographySolver(ransac_threshold=config.ransac_threshold,
                                min_points=config.min_points)

    @staticmethod
    def build_validator(config: CalibrationConfig) -> CalibrationValidator:
        return CalibrationValidator(max_mean_error=config.max_mean_error)

    @staticmethod
    def build_pose_solver(config: CalibrationConfig) -> CameraPoseSolver:
        return CameraPoseSolver(
            schedule=config.search_schedule,
            min_height=config.min_camera_height,
            fov_limits=config.fov_limits,
            min_points=config.min_points,
            seed=config.seed
        )
