import json
import logging

import pytest

from conftest import WORLD_POINTS, project_pitch_point
from pitchcam.cli import main
from pitchcam.pitch import PITCH_FEATURES


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def points_file(tmp_path, many_features):
    entries = []
    for frame, name in enumerate(many_features):
        feature = PITCH_FEATURES[name]
        x, y = project_pitch_point(feature.x, feature.y)
        entries.append({'feature_name': name, 'video': [x, y], 'frame_number': frame})
    path = tmp_path / 'points.json'
    path.write_text(json.dumps(entries))
    return path


def test_homography_command_stores_calibration(tmp_path, points_file, capsys):
    store_dir = tmp_path / 'store'

    code = main(['homography', '--points', str(points_file),
                 '--video-id', 'match-01', '--store-dir', str(store_dir)])

    assert code == 0
    assert (store_dir / 'calibration_match-01.json').exists()
    assert 'PITCH HOMOGRAPHY CALIBRATION SUMMARY' in capsys.readouterr().out


def test_transform_command_uses_stored_calibration(tmp_path, points_file, capsys):
    store_dir = tmp_path / 'store'
    main(['homography', '--points', str(points_file), '--video-id', 'match-01', '--store-dir', str(store_dir)])
    capsys.readouterr()
    x, y = project_pitch_point(40.0, 25.0)

    code = main(['transform', '--video-id', 'match-01', '--store-dir', str(store_dir),
                 '--x', str(x), '--y', str(y)])

    assert code == 0
    result = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert result['x'] == pytest.approx(40.0, abs=1e-2)
    assert result['y'] == pytest.approx(25.0, abs=1e-2)


def test_transform_without_calibration_fails(tmp_path):
    assert main(['transform', '--video-id', 'missing', '--store-dir', str(tmp_path),
                 '--x', '1', '--y', '2']) == 1


def test_homography_command_with_too_few_points(tmp_path, capsys):
    path = tmp_path / 'points.json'
    path.write_text(json.dumps([{'feature_name': 'center_spot', 'video': [10, 10]}]))

    assert main(['homography', '--points', str(path)]) == 1
    assert 'insufficient_points' in capsys.readouterr().out


def test_pose_command_outputs_parameters(tmp_path, capsys, pose_correspondences):
    path = tmp_path / 'corr.json'
    path.write_text(json.dumps([{'world': list(c.world), 'screen': list(c.screen)}
                                for c in pose_correspondences]))

    code = main(['--preset', 'fast', 'pose', '--correspondences', str(path),
                 '--aspect-ratio', str(16 / 9), '--seed', '7'])

    assert code == 0
    output = capsys.readouterr().out
    payload = json.loads(output[output.index('{'):])
    assert payload['error'] <= payload['initial_error']
    assert payload['parameters']['y'] >= 5.0


def test_pose_command_requires_viewport_for_pixels(tmp_path):
    path = tmp_path / 'corr.json'
    path.write_text(json.dumps([{'world': list(w), 'pixel': [100, 100]} for w in WORLD_POINTS]))

    assert main(['pose', '--correspondences', str(path), '--aspect-ratio', '1.5']) == 1


def test_invalid_config_file_is_rejected(tmp_path, points_file):
    config = tmp_path / 'config.json'
    config.write_text(json.dumps({'ransac_threshold': -1}))

    assert main(['--config', str(config), 'homography', '--points', str(points_file)]) == 1


def test_duplicate_feature_in_points_file_is_rejected(tmp_path, points_file, capsys):
    entries = json.loads(points_file.read_text())
    entries.append({'feature_name': 'top_left_corner', 'video': [300, 200], 'pitch': [5.0, 5.0]})
    points_file.write_text(json.dumps(entries))

    assert main(['homography', '--points', str(points_file)]) == 1
    output = capsys.readouterr().out
    assert "appears more than once" in output
    assert 'CALIBRATION SUMMARY' not in output


def test_off_pitch_point_is_rejected(tmp_path, points_file, capsys):
    entries = json.loads(points_file.read_text())
    entries[0]['pitch'] = [500.0, -300.0]
    points_file.write_text(json.dumps(entries))

    assert main(['homography', '--points', str(points_file)]) == 1
    output = capsys.readouterr().out
    assert "off the pitch" in output
    assert 'CALIBRATION SUMMARY' not in output
