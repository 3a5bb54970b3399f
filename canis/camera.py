"""Fly camera driven by Euler angles."""

from __future__ import annotations

import math
from enum import Enum, auto

import numpy as np

from canis.transform import look_at

YAW = 90.0
PITCH = 0.0
SPEED = 50.0
SENSITIVITY = 0.1
ZOOM = 10.0


class CameraMovement(Enum):
    """Directions the camera can move in."""

    FORWARD = auto()
    BACKWARD = auto()
    LEFT = auto()
    RIGHT = auto()


def _unit(vector: np.ndarray) -> np.ndarray:
    return vector / np.linalg.norm(vector)


class Camera:
    """Camera holding position and orientation, producing a view matrix."""

    def __init__(self, position=None, up=None, yaw: float = YAW, pitch: float = PITCH) -> None:
        self.position = np.array(position if position is not None else (0.0, 0.0, 0.0), dtype=float)
        self.world_up = np.array(up if up is not None else (0.0, 1.0, 0.0), dtype=float)
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.front = np.array([0.0, 0.0, -1.0])
        self.up = self.world_up.copy()
        self.right = np.array([1.0, 0.0, 0.0])
        self.movement_speed = SPEED
        self.mouse_sensitivity = SENSITIVITY
        self.zoom = ZOOM
        self.fov = math.radians(90.0)
        self.near_plane = 0.1
        self.far_plane = 100.0
        self.override_camera = False
        self.model_matrix = np.identity(4)
        self.update_camera_vectors()

    def get_view_matrix(self) -> np.ndarray:
        """View matrix, or the model matrix when the camera is overridden."""
        if self.override_camera:
            return self.model_matrix
        return look_at(self.position, self.position + self.front, self.up)

    def process_keyboard(self, direction: CameraMovement, delta_time: float) -> None:
        """Move the camera in a direction for the elapsed time."""
        velocity = self.movement_speed * delta_time
        if direction is CameraMovement.FORWARD:
            self.position = self.position + self.front * velocity
        elif direction is CameraMovement.BACKWARD:
            self.position = self.position - self.front * velocity
        elif direction is CameraMovement.LEFT:
            self.position = self.position - self.right * velocity
        elif direction is CameraMovement.RIGHT:
            self.position = self.position + self.right * velocity

    def process_mouse_movement(self, xoffset: float, yoffset: float, constrain_pitch: bool = True) -> None:
        """Turn the camera by a mouse offset, keeping pitch within 89 degrees."""
        self.yaw += xoffset * self.mouse_sensitivity
        self.pitch += yoffset * self.mouse_sensitivity
        if constrain_pitch:
            self.pitch = min(max(self.pitch, -89.0), 89.0)
        self.update_camera_vectors()

    def process_mouse_scroll(self, yoffset: float) -> None:
        """Change the zoom, kept between 1 and 45."""
        self.zoom = min(max(self.zoom - float(yoffset), 1.0), 45.0)

    def rotate(self, yaw: float, pitch: float) -> None:
        """Set yaw and pitch directly."""
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.update_camera_vectors()

    def update_camera_vectors(self) -> None:
        """Recompute front, right and up from yaw and pitch."""
        yaw = math.radians(self.yaw)
        pitch = math.radians(self.pitch)
        front = np.array([
            math.cos(yaw) * math.cos(pitch),
            math.sin(pitch),
            math.sin(yaw) * math.cos(pitch),
        ])
        self.front = _unit(front)
        self.right = _unit(np.cross(self.front, self.world_up))
        self.up = _unit(np.cross(self.right, self.front))