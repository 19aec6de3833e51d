from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence
import numpy as np


def rotation_from_quaternion(wxyz: Sequence[float]) -> np.ndarray:
    """3x3 rotation matrix from a quaternion ``(w, x, y, z)``; normalized first."""
    q = np.asarray(wxyz, dtype=np.float64)
    if q.shape != (4,):
        raise ValueError(f"Quaternion must have 4 components, got shape {q.shape}")
    n = np.linalg.norm(q)
    if not np.isfinite(n) or n < 1e-12:
        raise ValueError("Quaternion must be finite and non-zero")
    w, x, y, z = q / n
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ])


def rotation_from_euler(yaw: float, pitch: float, roll: float, degrees: bool = True) -> np.ndarray:
    """Yaw about Y, pitch about X, roll about Z, composed as ``Ry @ Rx @ Rz``."""
    ry, rx, rz = np.deg2rad((yaw, pitch, roll)) if degrees else (yaw, pitch, roll)
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)
    Rx = np.array([[1,0,0],[0,cx,-sx],[0,sx,cx]])
    Ry = np.array([[cy,0,sy],[0,1,0],[-sy,0,cy]])
    Rz = np.array([[cz,-sz,0],[sz,cz,0],[0,0,1]])
    return (Ry @ Rx @ Rz).astype(float)


@dataclass
class Transform:
    """Rotation followed by a uniform scale, both about the world origin."""
    R: np.ndarray = field(default_factory=lambda: np.eye(3))   # (3,3)
    scale: float = 1.0

    def __post_init__(self) -> None:
        self.R = np.asarray(self.R, dtype=np.float64)
        if self.R.shape != (3, 3):
            raise ValueError(f"Rotation must be a 3x3 matrix, got shape {self.R.shape}")
        self.scale = float(self.scale)

    @staticmethod
    def from_euler_deg(yaw: float = 0.0, pitch: float = 0.0, roll: float = 0.0, scale: float = 1.0) -> "Transform":
        return Transform(R=rotation_from_euler(yaw, pitch, roll), scale=scale)

    @staticmethod
    def from_quaternion(wxyz: Sequence[float], scale: float = 1.0) -> "Transform":
        return Transform(R=rotation_from_quaternion(wxyz), scale=scale)

    def apply(self, p: np.ndarray) -> np.ndarray:
        """Transform a single ``(3,)`` position or an ``(N, 3)`` array."""
        pts = np.asarray(p, dtype=np.float64)
        return (pts @ self.R.T) * self.scale
