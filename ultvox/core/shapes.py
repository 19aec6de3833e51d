from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .utils import as_vec3

# |normal component| below which a plane counts as parallel to the sweep axis
PARALLEL_EPSILON = 0.01
# half the space diagonal of a unit cell
SHELL_HALF_THICKNESS = float(np.sqrt(3.0) / 2.0)

AXES = (0, 1, 2)


def kept_axes(axis: int) -> Tuple[int, int]:
    """Coordinates that survive when ``axis`` is dropped, in ascending order."""
    if axis == 0:
        return (1, 2)
    if axis == 1:
        return (0, 2)
    if axis == 2:
        return (0, 1)
    raise ValueError(f"axis must be 0, 1 or 2, got {axis!r}")


@dataclass(frozen=True, eq=False)
class Triangle2D:
    """A triangle flattened onto a coordinate plane, used for lattice containment."""
    a: np.ndarray   # (2,)
    b: np.ndarray   # (2,)
    c: np.ndarray   # (2,)

    def __post_init__(self) -> None:
        for name in ("a", "b", "c"):
            object.__setattr__(self, name, np.asarray(getattr(self, name), dtype=np.float64))

    def contains(self, p: np.ndarray) -> np.ndarray:
        """Barycentric inside-test, boundary inclusive.

        ``p`` may be a single point ``(2,)`` or an array ``(N, 2)``. A zero-area
        triangle gives a zero denominator; the resulting inf/nan weights fail
        every comparison so nothing is reported inside.
        """
        pts = np.asarray(p, dtype=np.float64)
        v0 = self.b - self.a
        v1 = self.c - self.a
        v2 = pts - self.a

        dot00 = np.dot(v0, v0)
        dot01 = np.dot(v0, v1)
        dot11 = np.dot(v1, v1)
        dot02 = v2 @ v0
        dot12 = v2 @ v1

        with np.errstate(divide="ignore", invalid="ignore"):
            inv_denom = np.float64(1.0) / (dot00 * dot11 - dot01 * dot01)
            u = (dot11 * dot02 - dot01 * dot12) * inv_denom
            v = (dot00 * dot12 - dot01 * dot02) * inv_denom
            return (u >= 0.0) & (v >= 0.0) & (u + v <= 1.0)

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        verts = np.stack([self.a, self.b, self.c])
        lo = np.floor(verts.min(axis=0)).astype(np.int64)
        hi = np.ceil(verts.max(axis=0)).astype(np.int64)
        return lo, hi

    def lattice_points_inside(self) -> np.ndarray:
        """All integer points of the bounding box that lie inside, as an (N, 2) float array."""
        lo, hi = self.bounds()
        xs = np.arange(lo[0], hi[0] + 1, dtype=np.float64)
        ys = np.arange(lo[1], hi[1] + 1, dtype=np.float64)
        gx, gy = np.meshgrid(xs, ys, indexing="ij")
        grid = np.column_stack([gx.ravel(), gy.ravel()])
        if grid.shape[0] == 0:
            return grid.reshape(0, 2)
        return grid[self.contains(grid)]


@dataclass(frozen=True, eq=False)
class Triangle:
    """Triangle in 3D with its plane ``normal · p = offset``."""
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    normal: np.ndarray
    offset: float

    @staticmethod
    def from_points(a, b, c) -> "Triangle":
        a, b, c = as_vec3(a), as_vec3(b), as_vec3(c)
        # collinear points give a zero normal; solve() then always returns the sentinel
        normal = np.cross(a - b, a - c)
        return Triangle(a=a, b=b, c=c, normal=normal, offset=float(np.dot(a, normal)))

    def project(self, axis: int) -> Triangle2D:
        i, j = kept_axes(axis)
        return Triangle2D(
            a=self.a[[i, j]],
            b=self.b[[i, j]],
            c=self.c[[i, j]],
        )

    def solve(self, ray: np.ndarray, axis: int) -> np.ndarray:
        """Solve the plane equation for the coordinate dropped by ``project(axis)``.

        Returns ``inf`` where the plane is nearly parallel to ``axis``.
        """
        i, j = kept_axes(axis)
        coef_a, coef_b, coef_c = self.normal[i], self.normal[j], self.normal[axis]
        rays = np.asarray(ray, dtype=np.float64)
        if abs(coef_c) < PARALLEL_EPSILON:
            return np.full(rays.shape[:-1], np.inf)
        return (coef_a * rays[..., 0] + coef_b * rays[..., 1] - self.offset) / -coef_c


@dataclass(frozen=True, eq=False)
class Sphere:
    center: np.ndarray
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center))
        object.__setattr__(self, "radius", float(self.radius))

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Integer cube around the sphere, grown by one cell on each side."""
        lo = np.ceil(self.center - self.radius).astype(np.int64) - 1
        hi = np.floor(self.center + self.radius).astype(np.int64) + 1
        return lo, hi

    def contains(self, p: np.ndarray) -> np.ndarray:
        pts = np.asarray(p, dtype=np.float64)
        dist = np.linalg.norm(pts - self.center, axis=-1)
        return np.abs(dist - self.radius) <= SHELL_HALF_THICKNESS

    def lattice_points(self) -> np.ndarray:
        """Integer points of the shell as an (N, 3) int64 array."""
        lo, hi = self.bounds()
        axes = [np.arange(lo[k], hi[k] + 1, dtype=np.int64) for k in AXES]
        gx, gy, gz = np.meshgrid(*axes, indexing="ij")
        grid = np.column_stack([gx.ravel(), gy.ravel(), gz.ravel()])
        if grid.shape[0] == 0:
            return grid.reshape(0, 3)
        return grid[self.contains(grid.astype(np.float64))]
