from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional, Tuple
import numpy as np

from .scene import Element, PointElement, PolygonElement, Scene, SphereElement, TriangleElement
from .shapes import Sphere, Triangle
from .transform import Transform
from .voxelization import Primitive, Voxel, VoxelSet, merge, voxelize
from .layers import assign_layers, y_range
from .utils import get_logger, round_half_away

_log = get_logger()


def fan_triangles(positions: np.ndarray) -> Iterator[Triangle]:
    """Fan-decompose a polygon around its first vertex.

    Planarity and convexity are not checked; fewer than three vertices yield nothing.
    """
    for i in range(1, len(positions) - 1):
        yield Triangle.from_points(positions[0], positions[i], positions[i + 1])


def element_primitives(element: Element, positions: np.ndarray, scale: float) -> Tuple[List[Primitive], List[Voxel]]:
    """Split one transformed element into primitives and directly placed voxels."""
    if isinstance(element, PointElement):
        x, y, z = round_half_away(positions[0]).astype(np.int64).tolist()
        return [], [(x, y, z)]
    if isinstance(element, TriangleElement):
        return [Triangle.from_points(*positions)], []
    if isinstance(element, PolygonElement):
        return list(fan_triangles(positions)), []
    if isinstance(element, SphereElement):
        # rotation never changes the radius
        return [Sphere(positions[0], element.radius * scale)], []
    raise TypeError(f"Unknown element kind: {type(element).__name__}")


class SceneVoxelizer:
    """Applies a transform to a scene and unions the voxels of every element.

    Every element is resolved before any geometry is built, so an invalid
    point reference fails the whole request and no partial set is returned.
    """
    def __init__(self, transform: Optional[Transform] = None) -> None:
        self.transform = transform or Transform()

    def _primitives(self, scene: Scene) -> Iterator[Tuple[int, List[Primitive], List[Voxel]]]:
        resolved = [scene.resolve(element, index) for index, element in enumerate(scene.elements)]
        for index, (element, positions) in enumerate(zip(scene.elements, resolved)):
            moved = self.transform.apply(positions)
            prims, direct = element_primitives(element, moved, self.transform.scale)
            yield index, prims, direct

    def voxelize(self, scene: Scene) -> VoxelSet:
        voxels, _ = self._run(scene)
        return voxels

    def _run(self, scene: Scene) -> Tuple[VoxelSet, Dict[str, int]]:
        voxels: VoxelSet = set()
        n_prims = 0
        for index, prims, direct in self._primitives(scene):
            merge(voxels, direct)
            for prim in prims:
                merge(voxels, voxelize(prim))
            n_prims += len(prims)
            _log.debug("Element %d (%s): %d primitives, running total %d voxels",
                       index, scene.elements[index].kind, len(prims), len(voxels))
        stats = {"elements": len(scene.elements), "primitives": n_prims, "voxels": len(voxels)}
        _log.info("Voxelized %d elements → %d voxels", stats["elements"], stats["voxels"])
        return voxels, stats

    def run_to_writer(
        self,
        writer,
        scene: Scene,
        up_to_y: Optional[int] = None,
        transparent_layers: int = 2,
    ) -> Dict[str, Any]:
        """Voxelize, slice by layer and stream the result to ``writer``.

        An empty result still reaches the writer so an empty file is produced.
        Returns run statistics.
        """
        voxels, stats = self._run(scene)
        batch = assign_layers(voxels, up_to_y=up_to_y, transparent_layers=transparent_layers)
        writer.write_batch(batch)
        writer.close()
        stats = dict(stats)
        stats["written"] = len(batch.ijk)
        stats["y_range"] = y_range(voxels)
        return stats


def voxelize_transformed(scene: Scene, rotation: np.ndarray, scale: float) -> VoxelSet:
    """Voxel set of ``scene`` after rotating by ``rotation`` (3x3) and scaling by ``scale``."""
    return SceneVoxelizer(Transform(R=rotation, scale=scale)).voxelize(scene)
