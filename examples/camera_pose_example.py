#!/usr/bin/env python3
"""Recover the virtual camera for a 3D overlay from clicked pitch points"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pitchcam.camera import CameraPoseSolver, correspondences_from_pixels

WIDTH, HEIGHT = 1280, 720

# Pitch centred on the origin in the renderer's frame: x along the length, z across
CLICKS = [
    ((-52.5, 0.0, -34.0), (182.0, 167.0)),
    ((52.5, 0.0, -34.0), (1098.0, 167.0)),
    ((0.0, 0.0, -34.0), (640.0, 167.0)),
    ((0.0, 0.0, 0.0), (640.0, 341.0)),
    ((-36.0, 0.0, 0.0), (95.0, 341.0)),
    ((36.0, 0.0, 0.0), (1185.0, 341.0)),
]

def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    correspondences = correspondences_from_pixels(CLICKS, WIDTH, HEIGHT)
    solver = CameraPoseSolver(seed=2024)
    solution = solver.solve_pose(correspondences, WIDTH / HEIGHT)

    if not solution.success:
        print(f"Pose solve failed: {solution.message}")
        return

    params = solution.parameters
    print(f"Camera position: ({params.x:.1f}, {params.y:.1f}, {params.z:.1f})")
    print(f"Rotation: pitch {params.rotation_x:.3f} rad, yaw {params.rotation_y:.3f} rad")
    print(f"Field of view: {params.field_of_view:.1f} deg")
    print(f"Reprojection error: {solution.error:.6f} (initial {solution.initial_error:.6f})")

if __name__ == "__main__":
    main()
