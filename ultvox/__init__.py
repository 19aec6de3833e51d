"""UltVox – surface voxelizer for points, triangles, polygons and spheres.

Components:
- Triangle / Triangle2D / Sphere geometry (core.shapes)
- Per-primitive voxelization and set merge (core.voxelization)
- Scene of named points and typed elements (core.scene)
- Rotation + scale transform (core.transform)
- Scene orchestrator (core.voxelizer)
- Layer slicing and palette (core.layers)
- NPZ / PLY / LAS voxel writers (core.exporter)
- YAML snapshots and OBJ import (io)
"""

from .core.shapes import Triangle, Triangle2D, Sphere
from .core.voxelization import voxelize, voxelize_triangle, voxelize_sphere, merge
from .core.scene import (Scene, PointElement, TriangleElement, PolygonElement,
                         SphereElement, InvalidReferenceError)
from .core.transform import Transform, rotation_from_euler, rotation_from_quaternion
from .core.voxelizer import SceneVoxelizer, voxelize_transformed
from .core.layers import assign_layers, y_range
from .core.voxels import VoxelBatch
from .core.exporter import LasWriter, PlyWriter, NpzWriter
from .io import load_snapshot, save_snapshot, load_obj
