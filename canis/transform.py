"""4x4 matrix helpers and the position/rotation/scale transform."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np


def _vector(values, size: int = 3) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(size)
    return array.copy()


def _unit(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0.0:
        raise ValueError("cannot normalise a zero-length vector")
    return vector / length


def translate(matrix, offset) -> np.ndarray:
    """Return matrix multiplied by a translation."""
    result = np.identity(4)
    result[:3, 3] = _vector(offset)
    return np.asarray(matrix, dtype=float) @ result


def rotate(matrix, angle: float, axis) -> np.ndarray:
    """Return matrix multiplied by a rotation of angle radians about axis."""
    x, y, z = _unit(_vector(axis))
    c, s = math.cos(angle), math.sin(angle)
    t = 1.0 - c
    result = np.identity(4)
    result[:3, :3] = [
        [c + t * x * x, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, c + t * y * y, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, c + t * z * z],
    ]
    return np.asarray(matrix, dtype=float) @ result


def scale(matrix, factors) -> np.ndarray:
    """Return matrix multiplied by a scaling."""
    result = np.diag([*_vector(factors), 1.0])
    return np.asarray(matrix, dtype=float) @ result


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed projection mapping depth onto the range -1..1."""
    if aspect == 0.0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    result = np.zeros((4, 4))
    result[0, 0] = 1.0 / (aspect * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = -(far + near) / (far - near)
    result[2, 3] = -(2.0 * far * near) / (far - near)
    result[3, 2] = -1.0
    return result


def look_at(eye, center, up) -> np.ndarray:
    """Right-handed view matrix looking from eye towards center."""
    eye = _vector(eye)
    forward = _unit(_vector(center) - eye)
    side = _unit(np.cross(forward, _vector(up)))
    upward = np.cross(side, forward)
    result = np.identity(4)
    result[0, :3] = side
    result[1, :3] = upward
    result[2, :3] = -forward
    result[0, 3] = -side @ eye
    result[1, 3] = -upward @ eye
    result[2, 3] = forward @ eye
    return result


@dataclass
class Transform:
    """Position, Euler rotation in radians and scale of an object."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self) -> None:
        self.position = _vector(self.position)
        self.rotation = _vector(self.rotation)
        self.scale = _vector(self.scale)

    def matrix(self) -> np.ndarray:
        """Model matrix: translate, rotate about x, y, z, then scale."""
        result = translate(np.identity(4), self.position)
        result = rotate(result, self.rotation[0], (1.0, 0.0, 0.0))
        result = rotate(result, self.rotation[1], (0.0, 1.0, 0.0))
        result = rotate(result, self.rotation[2], (0.0, 0.0, 1.0))
        return scale(result, self.scale)