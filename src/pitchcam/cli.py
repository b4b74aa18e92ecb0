import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional
import logging

from .calibration.models import CorrespondencePoint, PitchCoord, VideoCoord
from .calibration.session import CalibrationSession
from .calibration.store import CalibrationStore
from .calibration.transformer import pitch_to_video, video_to_pitch
from .camera.pose_solver import PoseCorrespondence, correspondences_from_pixels
from .camera.projection import CameraParameters
from .config import CalibrationConfig, CalibrationConfigurationManager
from .pitch.features import get_feature

def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    """Setup logging configuration"""

    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

def create_argument_parser():
    """Create command line argument parser"""

    parser = argparse.ArgumentParser(
        prog='pitchcam',
        description="Football pitch camera calibration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fit a homography from clicked points and store it for the video
  pitchcam homography --points points.json --video-id match01 --store-dir calibrations

  # Solve the virtual camera pose from 2D-3D correspondences
  pitchcam pose --correspondences corr.json --aspect-ratio 1.7778 --seed 7

  # Map a pixel to pitch metres with a stored calibration
  pitchcam transform --video-id match01 --store-dir calibrations --x 640 --y 360
        """
    )

    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    parser.add_argument('--log-file', type=Path, help='Also write logs to this file')
    parser.add_argument('--config', type=Path, help='Configuration file path')
    parser.add_argument(
        '--preset',
        choices=['default', 'strict', 'fast'],
        default='default',
        help='Configuration preset to use'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    homography = subparsers.add_parser('homography', help='Fit and validate a pixel -> pitch homography')
    homography.add_argument('--points', type=Path, required=True,
                            help='JSON list of {feature_name, video: [x, y], frame_number}')
    homography.add_argument('--video-id', default='default', help='Video identity for the record')
    homography.add_argument('--store-dir', type=Path, help='Directory to save the calibration in')

    pose = subparsers.add_parser('pose', help='Solve camera position, rotation and field of view')
    pose.add_argument('--correspondences', type=Path, required=True,
                      help='JSON list of {world: [x, y, z], screen: [x, y]} (NDC) or {world, pixel}')
    pose.add_argument('--aspect-ratio', type=float, help='Viewport width / height')
    pose.add_argument('--width', type=float, help='Viewport width in pixels (for pixel input)')
    pose.add_argument('--height', type=float, help='Viewport height in pixels (for pixel input)')
    pose.add_argument('--initial-guess', type=Path, help='JSON camera parameters to start from')
    pose.add_argument('--seed', type=int, help='Seed for the random search')

    transform = subparsers.add_parser('transform', help='Transform a point with a stored calibration')
    transform.add_argument('--video-id', required=True)
    transform.add_argument('--store-dir', type=Path, required=True)
    transform.add_argument('--x', type=float, required=True)
    transform.add_argument('--y', type=float, required=True)
    transform.add_argument('--inverse', action='store_true', help='Map pitch metres to video pixels')

    return parser

def load_points(path: Path) -> List[CorrespondencePoint]:
    """Read clicked points; pitch coordinates default to the named feature"""

    with open(path, 'r') as f:
        entries = json.load(f)

    points = []
    seen = set()
    for entry in entries:
        name = entry['feature_name']
        if name in seen:
            raise ValueError(f"Feature '{name}' appears more than once in {path}")
        seen.add(name)

        if 'pitch' in entry:
            pitch = PitchCoord(float(entry['pitch'][0]), float(entry['pitch'][1]))
        else:
            feature = get_feature(name)
            pitch = PitchCoord(feature.x, feature.y)
        point = CorrespondencePoint(
            video=VideoCoord(float(entry['video'][0]), float(entry['video'][1])),
            pitch=pitch,
            feature_name=name,
            frame_number=int(entry.get('frame_number', 0)),
        )
        if not point.is_on_pitch():
            raise ValueError(f"Pitch position ({pitch.x}, {pitch.y}) of '{name}' is off the pitch")
        points.append(point)
    return points

def load_correspondences(path: Path, width: Optional[float],
                         height: Optional[float]) -> List[PoseCorrespondence]:
    with open(path, 'r') as f:
        entries = json.load(f)

    if entries and 'pixel' in entries[0]:
        if not width or not height:
            raise ValueError("--width and --height are required for pixel correspondences")
        return correspondences_from_pixels(
            [(tuple(e['world']), tuple(e['pixel'])) for e in entries], width, height
        )

    return [PoseCorrespondence(world=tuple(e['world']), screen=tuple(e['screen'])) for e in entries]

def run_homography(args, config: CalibrationConfig, manager: CalibrationConfigurationManager) -> int:
    logger = logging.getLogger(__name__)

    session = CalibrationSession(
        args.video_id,
        solver=manager.build_homography_solver(config),
        validator=manager.build_validator(config),
        singular_epsilon=config.singular_epsilon
    )
    session.points = load_points(args.points)
    outcome = session.compute()

    print("\n" + "=" * 60)
    print("PITCH HOMOGRAPHY CALIBRATION SUMMARY")
    print("=" * 60)

    if not outcome.success:
        print(f"Calibration failed ({outcome.failure.value}): {outcome.message}")
        return 1

    metrics = outcome.calibration.metrics
    print(f"Video ID: {args.video_id}")
    print(f"Points: {metrics.point_count}")
    print(f"Mean Error: {metrics.mean_error_meters:.3f} m")
    print(f"Max Error: {metrics.max_error_meters:.3f} m")
    print(f"Quality: {metrics.quality}")
    print(f"Valid: {'yes' if metrics.is_valid else 'no'}")
    if metrics.message:
        print(metrics.message)

    if args.store_dir:
        store = CalibrationStore(args.store_dir)
        session.save(store)
        logger.info(f"Calibration stored in: {args.store_dir}")

    return 0 if metrics.is_valid else 1

def run_pose(args, config: CalibrationConfig, manager: CalibrationConfigurationManager) -> int:
    if args.seed is not None:
        config.seed = args.seed

    aspect_ratio = args.aspect_ratio
    if aspect_ratio is None:
        if not args.width or not args.height:
            raise ValueError("Provide --aspect-ratio or both --width and --height")
        aspect_ratio = args.width / args.height

    correspondences = load_correspondences(args.correspondences, args.width, args.height)

    initial_guess = None
    if args.initial_guess:
        with open(args.initial_guess, 'r') as f:
            initial_guess = CameraParameters.from_dict(json.load(f))

    solver = manager.build_pose_solver(config)
    solution = solver.solve_pose(correspondences, aspect_ratio, initial_guess)

    if not solution.success:
        print(f"Pose solve failed ({solution.failure.value}): {solution.message}")
        return 1

    print(json.dumps({
        'parameters': solution.parameters.to_dict(),
        'error': solution.error,
        'initial_error': solution.initial_error,
        'stage_errors': solution.stage_errors,
    }, indent=2))
    return 0

def run_transform(args) -> int:
    store = CalibrationStore(args.store_dir)
    calibration = store.load(args.video_id)
    if calibration is None:
        print(f"No calibration stored for video '{args.video_id}'")
        return 1

    if args.inverse:
        result = pitch_to_video(args.x, args.y, calibration.inverse_matrix)
    else:
        result = video_to_pitch(args.x, args.y, calibration.homography_matrix)

    if not result.is_finite():
        print("Point maps to infinity under this calibration")
        return 1

    print(json.dumps({'x': result.x, 'y': result.y}))
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)
    logger = logging.getLogger(__name__)

    manager = CalibrationConfigurationManager()

    try:
        if args.config and args.config.exists():
            logger.info(f"Loading configuration from: {args.config}")
            config = manager.load_configuration(args.config)
        else:
            config = manager.create_preset(args.preset)

        issues = manager.validate_configuration(config)
        if issues:
            logger.error("Configuration validation failed:")
            for issue in issues:
                logger.error(f"  - {issue}")
            return 1

        if args.command == 'homography':
            return run_homography(args, config, manager)
        if args.command == 'pose':
            return run_pose(args, config, manager)
        return run_transform(args)

    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Command failed: {e}", exc_info=args.verbose)
        return 1

if __name__ == "__main__":
    sys.exit(main())
