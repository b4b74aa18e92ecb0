"""Pinhole camera model used by the pose solver.

World axes follow the renderer: the pitch lies in the y=0 plane, y points up
and an unrotated camera looks down -z. Rotation is applied yaw (about y) then
pitch (about x), with no roll; this is Euler order "YXZ".
"""
import math
import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict, Tuple

@dataclass
class CameraParameters:
    """Extrinsics plus vertical field of view of a virtual broadcast camera"""
    x: float
    y: float
    z: float
    rotation_x: float  # pitch, radians
    rotation_y: float  # yaw, radians
    rotation_z: float = 0.0  # roll is not estimated
    field_of_view: float = 45.0  # vertical, degrees

    def as_vector(self) -> np.ndarray:
        """Solved parameters as [x, y, z, rotation_x, rotation_y, field_of_view]"""
        return np.array([self.x, self.y, self.z,
                         self.rotation_x, self.rotation_y, self.field_of_view], dtype=np.float64)

    @classmethod
    def from_vector(cls, vector) -> 'CameraParameters':
        x, y, z, rx, ry, fov = (float(v) for v in vector)
        return cls(x=x, y=y, z=z, rotation_x=rx, rotation_y=ry, rotation_z=0.0, field_of_view=fov)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'CameraParameters':
        return cls(
            x=float(data['x']),
            y=float(data['y']),
            z=float(data['z']),
            rotation_x=float(data.get('rotation_x', 0.0)),
            rotation_y=float(data.get('rotation_y', 0.0)),
            rotation_z=float(data.get('rotation_z', 0.0)),
            field_of_view=float(data.get('field_of_view', 45.0)),
        )


# Typical main-stand broadcast camera
DEFAULT_CAMERA = CameraParameters(x=0.0, y=30.0, z=60.0,
                                  rotation_x=-0.4, rotation_y=0.0, field_of_view=30.0)


def rotation_matrix_yxz(rotation_x: float, rotation_y: float, rotation_z: float = 0.0) -> np.ndarray:
    """R = Ry(yaw) @ Rx(pitch) @ Rz(roll)"""
    cx, sx = math.cos(rotation_x), math.sin(rotation_x)
    cy, sy = math.cos(rotation_y), math.sin(rotation_y)
    cz, sz = math.cos(rotation_z), math.sin(rotation_z)

    rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return ry @ rx @ rz


def perspective_matrix(field_of_view: float, aspect_ratio: float,
                       near: float, far: float) -> np.ndarray:
    """OpenGL-style projection with a vertical field of view in degrees"""
    f = 1.0 / math.tan(math.radians(field_of_view) / 2.0)
    depth = near - far
    return np.array([
        [f / aspect_ratio, 0.0, 0.0, 0.0],
        [0.0, f, 0.0, 0.0],
        [0.0, 0.0, (far + near) / depth, 2.0 * far * near / depth],
        [0.0, 0.0, -1.0, 0.0],
    ])


def pixels_to_ndc(x: float, y: float, width: float, height: float) -> Tuple[float, float]:
    """Raw pixel (origin top-left, y down) to normalised device coords (y up)"""
    return (x / width) * 2.0 - 1.0, -((y / height) * 2.0 - 1.0)


def ndc_to_pixels(x: float, y: float, width: float, height: float) -> Tuple[float, float]:
    return (x + 1.0) / 2.0 * width, (1.0 - y) / 2.0 * height


class PerspectiveCamera:
    """Projects world points to NDC for a given parameter vector"""

    def __init__(self, aspect_ratio: float, near: float = 0.1, far: float = 1000.0):
        if not aspect_ratio > 0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        self.aspect_ratio = aspect_ratio
        self.near = near
        self.far = far

    def view_matrix(self, params: np.ndarray) -> np.ndarray:
        """Inverse of the camera world matrix T(position) @ R"""
        rotation = rotation_matrix_yxz(params[3], params[4], 0.0)
        position = np.asarray(params[:3], dtype=np.float64)
        view = np.eye(4)
        view[:3, :3] = rotation.T
        view[:3, 3] = -rotation.T @ position
        return view

    def view_projection(self, params: np.ndarray) -> np.ndarray:
        projection = perspective_matrix(params[5], self.aspect_ratio, self.near, self.far)
        return projection @ self.view_matrix(params)

    def project(self, world_points: np.ndarray, params: np.ndarray) -> np.ndarray:
        """(N, 3) world points -> (N, 2) NDC; points on the camera plane give inf/nan"""
        points = np.asarray(world_points, dtype=np.float64).reshape(-1, 3)
        homogeneous = np.hstack([points, np.ones((len(points), 1))])
        clip = homogeneous @ self.view_projection(params).T
        with np.errstate(divide='ignore', invalid='ignore'):
            return clip[:, :2] / clip[:, 3:4]

    def mean_squared_error(self, world_points: np.ndarray, screen_points: np.ndarray,
                           params: np.ndarray) -> float:
        """Mean squared NDC distance; non-finite projections count as +inf"""
        projected = self.project(world_points, params)
        with np.errstate(over='ignore', invalid='ignore'):
            error = float(np.mean(np.sum((projected - screen_points) ** 2, axis=1)))
        return error if math.isfinite(error) else math.inf
