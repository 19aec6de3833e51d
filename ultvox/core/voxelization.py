from __future__ import annotations
from typing import Iterable, Set, Tuple, Union
import numpy as np

from .shapes import AXES, Sphere, Triangle, kept_axes
from .utils import round_half_away

Voxel = Tuple[int, int, int]
VoxelSet = Set[Voxel]
Primitive = Union[Triangle, Sphere]


def _as_voxels(coords: np.ndarray) -> Iterable[Voxel]:
    return map(tuple, coords.astype(np.int64, copy=False).tolist())


def voxelize_triangle(tri: Triangle) -> VoxelSet:
    """Surface voxels of a triangle from three independent axis sweeps.

    Each sweep rasterizes the projection orthogonal to one axis and solves the
    plane for that axis at every lattice point inside it. Sweeps along which
    the plane is nearly parallel yield nothing; the other two cover them.
    """
    voxels: VoxelSet = set()
    for axis in AXES:
        rays = tri.project(axis).lattice_points_inside()
        if rays.shape[0] == 0:
            continue
        solved = round_half_away(tri.solve(rays, axis))
        keep = np.isfinite(solved)
        if not keep.any():
            continue
        i, j = kept_axes(axis)
        coords = np.empty((int(keep.sum()), 3), dtype=np.int64)
        coords[:, axis] = solved[keep]
        coords[:, i] = rays[keep, 0]
        coords[:, j] = rays[keep, 1]
        voxels.update(_as_voxels(coords))
    return voxels


def voxelize_sphere(sphere: Sphere) -> VoxelSet:
    """One voxel thick hollow shell around the sphere surface."""
    return set(_as_voxels(sphere.lattice_points()))


def voxelize(primitive: Primitive) -> VoxelSet:
    if isinstance(primitive, Triangle):
        return voxelize_triangle(primitive)
    if isinstance(primitive, Sphere):
        return voxelize_sphere(primitive)
    raise TypeError(f"Cannot voxelize {type(primitive).__name__}")


def merge(base: VoxelSet, other: Iterable[Voxel]) -> VoxelSet:
    """Union ``other`` into ``base`` in place and return ``base``."""
    base.update(other)
    return base
