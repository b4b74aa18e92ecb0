#!/usr/bin/env python3
"""Calibrate a broadcast frame by clicking known pitch features"""

import logging
import sys
import tempfile
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pitchcam.calibration import CalibrationSession, CalibrationStore
from pitchcam.utils import get_pitch_zone

# Clicks a user might make on a main-camera frame
CLICKS = {
    'top_left_corner': (120.0, 150.0),
    'top_right_corner': (1223.6, 164.1),
    'bottom_right_corner': (1125.6, 518.3),
    'bottom_left_corner': (254.7, 518.9),
    'center_spot': (691.0, 359.1),
    'left_penalty_spot': (300.8, 357.1),
    'right_penalty_spot': (1070.2, 361.1),
}

def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    session = CalibrationSession(video_id='example-match')
    for frame, (feature, (x, y)) in enumerate(CLICKS.items()):
        session.select_feature(feature)
        session.add_point(x, y, frame_number=frame)

    outcome = session.compute()
    if not outcome.success:
        print(f"Calibration failed: {outcome.message}")
        return

    metrics = outcome.calibration.metrics
    print(f"Mean error: {metrics.mean_error_meters:.2f} m, max error: {metrics.max_error_meters:.2f} m "
          f"({metrics.quality}, {'valid' if metrics.is_valid else 'needs more points'})")

    # Tag an event at a clicked pixel
    event = session.video_to_pitch(640.0, 360.0)
    print(f"Event at ({event.x:.1f} m, {event.y:.1f} m) in zone '{get_pitch_zone(event.x, event.y)}'")

    with tempfile.TemporaryDirectory() as tmp:
        store = CalibrationStore(Path(tmp))
        session.save(store)
        print(f"Saved calibration to {store.path_for('example-match')}")

if __name__ == "__main__":
    main()
